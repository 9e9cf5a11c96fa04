"""
Configuration dataclasses for sessions, the fetcher, template sites and the
client facade.
"""

from dataclasses import dataclass, field

DEFAULT_COVER = "https://placehold.co/300x450?text=No+Cover"


@dataclass
class SessionConfig:
    """HTTP session settings shared by every backend.

    Attributes:
        timeout: Total per-request timeout in seconds.
        max_connections: Connection pool size (per host for aiohttp).
        user_agent: Replaces the default browser User-Agent when set.
        headers: Replaces the default header set when set.
        cookies: Cookies sent with every request, e.g. age-gate flags.
        impersonate: Browser fingerprint to mimic; curl_cffi only.
        verify_ssl: Verify TLS certificates.
        http2: Negotiate HTTP/2; httpx only.
        trust_env: Honor proxy variables from the environment.
        proxy: Proxy URL applied to all requests.
        proxy_user: Proxy username; used only together with ``proxy_pass``.
        proxy_pass: Proxy password.
    """

    timeout: float = 10.0
    max_connections: int = 10
    user_agent: str | None = None
    headers: dict[str, str] | None = None
    cookies: dict[str, str] | None = None
    impersonate: str | None = "chrome"
    verify_ssl: bool = True
    http2: bool = True
    trust_env: bool = False
    proxy: str | None = None
    proxy_user: str | None = None
    proxy_pass: str | None = None


@dataclass
class FetcherConfig:
    """Configuration for the shared HTML fetcher.

    Attributes:
        max_rps: Maximum requests per second across all sources; ``0`` disables
            the limiter.
        backend: HTTP backend name (aiohttp, httpx, curl_cffi).
        session_cfg: HTTP session configuration.
    """

    max_rps: float = 1000.0
    backend: str = "aiohttp"
    session_cfg: SessionConfig = field(default_factory=SessionConfig)


@dataclass(frozen=True, slots=True)
class SourceOptions:
    """Per-instance options of a template-family source.

    Attributes:
        language: Content language code of the site.
        reverse_chapters: Whether the site lists chapters newest first, so the
            collected list must be reversed once.
        default_cover: Placeholder used when no cover image resolves.
        page_interval: Seconds to wait between sequential chapter-list page
            requests; ``0`` disables the wait.
        novels_path: Path segment under which novels live (Madara sites).
    """

    language: str | None = None
    reverse_chapters: bool = False
    default_cover: str = DEFAULT_COVER
    page_interval: float = 0.5
    novels_path: str = "novel"


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """A site deployment of a known template family.

    Attributes:
        source_id: Stable, globally unique identifier of the site.
        template: Key of the template engine (e.g. ``"wpmangastream"``).
        base_url: Absolute root URL of the site.
        source_name: Display name.
        options: Instance options forwarded to the engine.
    """

    source_id: int
    template: str
    base_url: str
    source_name: str
    options: SourceOptions = field(default_factory=SourceOptions)


@dataclass
class ClientConfig:
    """Top-level configuration for :class:`SourceClient`.

    Attributes:
        page_interval: Delay between sequential page requests applied to
            every source; None keeps each source's own interval.
        source_intervals: Per-source delay overrides keyed by ``source_id``;
            these win over ``page_interval``.
        sources: Additional template-family sites to register.
        fetcher_cfg: Configuration for the fetcher.
    """

    page_interval: float | None = None
    source_intervals: dict[int, float] = field(default_factory=dict)
    sources: list[SourceConfig] = field(default_factory=list)
    fetcher_cfg: FetcherConfig = field(default_factory=FetcherConfig)
