"""
Configuration management for the topic graph engine
"""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


CONFIG_ENV_VAR = "TOPIC_GRAPH_CONFIG"


@dataclass
class StoreConfig:
    """Storage backend configuration"""
    backend: str = "sqlite"
    db_path: str = "topic_graph.db"
    collection: str = "topics"


@dataclass
class GraphConfig:
    """Traversal defaults"""
    only_latest: bool = True
    queue_compact_ratio: float = 0.5


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    log_file: Optional[str] = "topic_graph.log"

    @property
    def level_value(self) -> int:
        """Numeric logging level, falling back to INFO for unknown names."""
        value = logging.getLevelName(self.level.upper())
        return value if isinstance(value, int) else logging.INFO


@dataclass
class Config:
    """Main configuration class for the topic graph engine"""
    store: StoreConfig = field(default_factory=StoreConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    _instance: Optional["Config"] = field(default=None, init=False, repr=False)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file or use defaults.

        Args:
            config_path: Path to config file. Defaults to $TOPIC_GRAPH_CONFIG,
                then config.yaml in the working directory.

        Returns:
            Config instance with loaded or default settings.
        """
        if config_path is None:
            config_path = Path(os.getenv(CONFIG_ENV_VAR, "config.yaml"))

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        sections = {
            "store": (config.store, ["backend", "db_path", "collection"]),
            "graph": (config.graph, ["only_latest", "queue_compact_ratio"]),
            "logging": (config.logging, ["level", "log_file"]),
        }
        for name, (section, keys) in sections.items():
            section_data = data.get(name) or {}
            for key in keys:
                if key in section_data:
                    setattr(section, key, section_data[key])

        if not 0 < config.graph.queue_compact_ratio <= 1:
            raise ValueError(
                f"graph.queue_compact_ratio must be in (0, 1], "
                f"got {config.graph.queue_compact_ratio}"
            )

        return config

    @classmethod
    def get_instance(cls, config_path: Optional[Path] = None) -> "Config":
        """Get singleton instance of Config.

        Args:
            config_path: Path to config file (only used on first call).

        Returns:
            Singleton Config instance.
        """
        if cls._instance is None:
            cls._instance = cls.load(config_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (useful for testing)."""
        cls._instance = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """Convenience function to get config singleton."""
    return Config.get_instance(config_path)
