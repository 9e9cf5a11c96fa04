"""
Registration and discovery of source adapters.

Two kinds of plugins exist:

* standalone site adapters, one class per site, living in
  ``novelsource.plugins.sites.<site>.source``;
* template-family engines living in
  ``novelsource.plugins.multisrc.<template>.source``, instantiated once per
  :class:`SourceConfig` row declared in the sibling ``sites`` module or in
  user configuration.

Everything is keyed by the integer ``source_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from importlib import import_module
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from novelsource.plugins.base.errors import SourceNotFound

if TYPE_CHECKING:
    from novelsource.plugins.base.fetcher import SourceFetcher
    from novelsource.plugins.base.source import BaseSource, TemplateSource
    from novelsource.plugins.utils.throttle import DelayPolicy
    from novelsource.schemas import SourceConfig, SourceInfo

    S = TypeVar("S", bound=BaseSource)
    E = TypeVar("E", bound=TemplateSource)

logger = logging.getLogger(__name__)

_PLUGINS_PKG = "novelsource.plugins"


class SourceHub:
    """Central registry of every source known to the library."""

    def __init__(self) -> None:
        self._sources: dict[int, type[BaseSource]] = {}
        self._templates: dict[str, type[TemplateSource]] = {}
        self._sites: dict[int, SourceConfig] = {}
        self._loaded = False

    def register_source(self) -> Callable[[type[S]], type[S]]:
        """Decorator for registering a standalone site adapter class.

        The class must define ``source_id``.
        """

        def deco(cls: type[S]) -> type[S]:
            self._claim_id(cls.source_id, cls.__name__)
            self._sources[cls.source_id] = cls
            return cls

        return deco

    def register_template(
        self,
        key: str | None = None,
    ) -> Callable[[type[E]], type[E]]:
        """Decorator for registering a template-family engine class."""

        def deco(cls: type[E]) -> type[E]:
            name = (key or cls.__module__.split(".")[-2]).strip().lower()
            cls.template = name
            self._templates[name] = cls
            return cls

        return deco

    def add_sites(self, configs: Iterable[SourceConfig]) -> None:
        """Register site deployments of a template family.

        Raises:
            ValueError: If a ``source_id`` is already taken by a different
                source. Registering an identical row again is a no-op.
        """
        for cfg in configs:
            if self._sites.get(cfg.source_id) == cfg:
                continue
            self._claim_id(cfg.source_id, cfg.source_name)
            self._sites[cfg.source_id] = cfg

    def build_source(
        self,
        source_id: int,
        fetcher: SourceFetcher,
        *,
        delay: DelayPolicy | None = None,
    ) -> BaseSource:
        """Instantiate the source registered under ``source_id``.

        Raises:
            SourceNotFound: If no source or site uses this id.
        """
        self.load_builtin()

        if cls := self._sources.get(source_id):
            return cls(fetcher, delay=delay)

        cfg = self._sites.get(source_id)
        if cfg is None:
            raise SourceNotFound(f"Unknown source id: {source_id!r}")

        engine = self._get_template(cfg.template)
        return engine.from_config(cfg, fetcher, delay=delay)

    def list_sources(self, language: str | None = None) -> list[SourceInfo]:
        """Describe every registered source, optionally filtered by language."""
        self.load_builtin()

        infos: list[SourceInfo] = [
            {
                "source_id": cls.source_id,
                "source_name": cls.source_name,
                "base_url": cls.base_url,
                "language": cls.language,
                "template": "",
            }
            for cls in self._sources.values()
        ]
        infos.extend(
            {
                "source_id": cfg.source_id,
                "source_name": cfg.source_name,
                "base_url": cfg.base_url.rstrip("/"),
                "language": cfg.options.language,
                "template": cfg.template,
            }
            for cfg in self._sites.values()
        )

        if language is not None:
            infos = [i for i in infos if i["language"] == language]
        return sorted(infos, key=lambda i: i["source_id"])

    def load_builtin(self) -> None:
        """Import every built-in site adapter and template site list once."""
        if self._loaded:
            return
        self._loaded = True
        self._import_all("sites", "source")
        self._import_all("multisrc", "sites")

    def _get_template(self, key: str) -> type[TemplateSource]:
        cls = self._templates.get(key)
        if cls is None:
            self._try_import(f"{_PLUGINS_PKG}.multisrc.{key}.source")
            cls = self._templates.get(key)
        if cls is None:
            raise SourceNotFound(f"Unknown template family: {key!r}")
        return cls

    def _claim_id(self, source_id: int, owner: str) -> None:
        if source_id in self._sources or source_id in self._sites:
            raise ValueError(
                f"Source id {source_id} is already registered; "
                f"cannot assign it to {owner!r}"
            )

    def _import_all(self, group: str, kind: str) -> None:
        try:
            pkg = import_module(f"{_PLUGINS_PKG}.{group}")
        except ModuleNotFoundError:
            return

        # plugin directories are namespace packages, invisible to pkgutil
        names = {
            child.name
            for root in pkg.__path__
            for child in Path(root).iterdir()
            if child.is_dir() and not child.name.startswith(("_", "."))
        }
        for name in sorted(names):
            self._try_import(f"{pkg.__name__}.{name}.{kind}")

    @staticmethod
    def _try_import(modname: str) -> None:
        try:
            import_module(modname)
        except ModuleNotFoundError as e:
            if e.name and modname.startswith(e.name):
                logger.debug("No plugin module %s", modname)
                return
            raise


hub = SourceHub()
