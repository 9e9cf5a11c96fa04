from __future__ import annotations

from typing import Any

from novelsource.schemas import (
    DEFAULT_COVER,
    ClientConfig,
    FetcherConfig,
    SessionConfig,
    SourceConfig,
    SourceOptions,
)


class ConfigAdapter:
    """High-level accessor over a loaded settings mapping.

    The mapping has a ``general`` table holding network and pacing settings,
    and an optional ``custom_sources`` array declaring extra sites of a known
    template family::

        [general]
        backend = "httpx"
        page_interval = 1.0

        [[custom_sources]]
        source_id = 9001
        template = "wpmangastream"
        base_url = "https://example-novels.com"
        source_name = "Example Novels"
        language = "en"
        reverse_chapters = true

    Args:
        config: Fully loaded configuration mapping.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_session_config(self) -> SessionConfig:
        """Build a SessionConfig from the general settings."""
        cfg = self._gen_cfg()

        return SessionConfig(
            timeout=cfg.get("timeout", 10.0),
            max_connections=cfg.get("max_connections", 10),
            user_agent=cfg.get("user_agent"),
            headers=cfg.get("headers"),
            cookies=cfg.get("cookies"),
            impersonate=cfg.get("impersonate", "chrome"),
            verify_ssl=cfg.get("verify_ssl", True),
            http2=cfg.get("http2", True),
            trust_env=cfg.get("trust_env", False),
            proxy=cfg.get("proxy"),
            proxy_user=cfg.get("proxy_user"),
            proxy_pass=cfg.get("proxy_pass"),
        )

    def get_fetcher_config(self) -> FetcherConfig:
        """Build a FetcherConfig from the general settings."""
        cfg = self._gen_cfg()

        return FetcherConfig(
            max_rps=float(cfg.get("max_rps", 1000.0)),
            backend=cfg.get("backend", "aiohttp"),
            session_cfg=self.get_session_config(),
        )

    def get_client_config(self) -> ClientConfig:
        """Build a ClientConfig including any custom template-family sites."""
        interval = self._gen_cfg().get("page_interval")

        return ClientConfig(
            page_interval=float(interval) if interval is not None else None,
            source_intervals=self.get_source_intervals(),
            sources=self.get_custom_sources(),
            fetcher_cfg=self.get_fetcher_config(),
        )

    def get_custom_sources(self) -> list[SourceConfig]:
        """Parse the ``custom_sources`` rows into SourceConfig objects.

        Raises:
            ValueError: If a row is not a table or misses a required field.
        """
        rows = self._config.get("custom_sources") or []
        if not isinstance(rows, list):
            raise ValueError(
                f"custom_sources must be a list, got {type(rows).__name__}"
            )
        return [self._dict_to_source_cfg(row) for row in rows]

    def get_source_intervals(self) -> dict[int, float]:
        """Collect ``page_interval`` overrides from the ``sources.<id>`` tables."""
        intervals: dict[int, float] = {}
        for key, block in self._sources_cfg().items():
            if isinstance(block, dict) and "page_interval" in block:
                intervals[int(key)] = float(block["page_interval"])
        return intervals

    def get_log_level(self) -> str:
        """Return the configured logging level, ``"INFO"`` if missing."""
        debug_cfg = self._gen_cfg().get("debug") or {}
        return debug_cfg.get("log_level") or "INFO"

    def _gen_cfg(self) -> dict[str, Any]:
        general = self._config.get("general")
        return general if isinstance(general, dict) else {}

    def _sources_cfg(self) -> dict[str, Any]:
        sources = self._config.get("sources")
        return sources if isinstance(sources, dict) else {}

    @staticmethod
    def _dict_to_source_cfg(data: Any) -> SourceConfig:
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid source entry: expected a table, got {type(data).__name__}"
            )

        missing = [
            key
            for key in ("source_id", "template", "base_url", "source_name")
            if key not in data
        ]
        if missing:
            raise ValueError(f"Source entry is missing fields: {', '.join(missing)}")

        options = SourceOptions(
            language=data.get("language"),
            reverse_chapters=bool(data.get("reverse_chapters", False)),
            default_cover=data.get("default_cover") or DEFAULT_COVER,
            page_interval=float(data.get("page_interval", 0.5)),
            novels_path=data.get("novels_path", "novel"),
        )
        return SourceConfig(
            source_id=int(data["source_id"]),
            template=str(data["template"]).strip().lower(),
            base_url=str(data["base_url"]),
            source_name=str(data["source_name"]),
            options=options,
        )
