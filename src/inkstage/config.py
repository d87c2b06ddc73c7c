"""Configuration management for Inkstage.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from inkstage.core.feed import DEFAULT_TTL
from inkstage.core.permalinks import DEFAULT_LEGACY_TEMPLATE, PermalinkTemplate
from inkstage.core.resolver import DEFAULT_GENERATOR

CONFIG_FILENAME = "inkstage.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 2368


@dataclass
class SiteConfig:
    """Site URL configuration."""

    url: str = "http://127.0.0.1:2368"
    editor_path: str = "/ghost/editor/"
    legacy_permalink: str = DEFAULT_LEGACY_TEMPLATE


@dataclass
class ContentConfig:
    """Content source configuration."""

    data_file: Path = field(default_factory=lambda: Path("content.json"))
    themes_dir: Path = field(default_factory=lambda: Path("themes"))
    watch: bool = True


@dataclass
class FeedConfig:
    """Syndication feed configuration."""

    generator: str = DEFAULT_GENERATOR
    ttl: int = DEFAULT_TTL


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    content: ContentConfig
    feed: FeedConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for inkstage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            content=ContentConfig(),
            feed=FeedConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site")),
            content=cls._parse_content(data.get("content"), config_dir),
            feed=cls._parse_feed(data.get("feed")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 2368)
        if not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section.

        The legacy permalink is compiled here so that a malformed template
        stops startup.

        Args:
            data: Raw site section data

        Returns:
            SiteConfig instance

        Raises:
            InvalidTemplate: If site.legacy_permalink is malformed
        """
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        defaults = SiteConfig()

        url = data.get("url", defaults.url)
        if not isinstance(url, str):
            raise ValueError("site.url must be a string")
        if not url.startswith(("http://", "https://")):
            raise ValueError("site.url must be an absolute http(s) URL")

        editor_path = data.get("editor_path", defaults.editor_path)
        if not isinstance(editor_path, str):
            raise ValueError("site.editor_path must be a string")

        legacy_permalink = data.get("legacy_permalink", defaults.legacy_permalink)
        if not isinstance(legacy_permalink, str):
            raise ValueError("site.legacy_permalink must be a string")
        PermalinkTemplate.from_template(legacy_permalink)

        return SiteConfig(url=url, editor_path=editor_path, legacy_permalink=legacy_permalink)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(
                data_file=config_dir / "content.json",
                themes_dir=config_dir / "themes",
            )

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        data_file = data.get("data_file", "content.json")
        if not isinstance(data_file, str):
            raise ValueError("content.data_file must be a string")

        themes_dir = data.get("themes_dir", "themes")
        if not isinstance(themes_dir, str):
            raise ValueError("content.themes_dir must be a string")

        watch = data.get("watch", True)
        if not isinstance(watch, bool):
            raise ValueError("content.watch must be a boolean")

        return ContentConfig(
            data_file=config_dir / data_file,
            themes_dir=config_dir / themes_dir,
            watch=watch,
        )

    @classmethod
    def _parse_feed(cls, data: object) -> FeedConfig:
        if data is None:
            return FeedConfig()

        if not isinstance(data, dict):
            raise ValueError("feed section must be a dictionary")

        generator = data.get("generator", DEFAULT_GENERATOR)
        if not isinstance(generator, str):
            raise ValueError("feed.generator must be a string")

        ttl = data.get("ttl", DEFAULT_TTL)
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 1:
            raise ValueError("feed.ttl must be a positive integer")

        return FeedConfig(generator=generator, ttl=ttl)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        data_file: Path | None = None,
        watch: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            data_file: Override content.data_file
            watch: Override content.watch

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if data_file is not None or watch is not None:
            content = replace(
                self.content,
                data_file=data_file if data_file is not None else self.content.data_file,
                watch=watch if watch is not None else self.content.watch,
            )

        return replace(self, server=server, content=content)
