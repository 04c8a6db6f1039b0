"""
Configuration management for the search engine.
"""

import os
import threading
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict
from pathlib import Path
import json
import logging
from jsonschema import validate, ValidationError

from search_engine.concurrent.models import DEFAULT_THREADS, WorkQueueConfig
from search_engine.utils.errors import ConfigurationError


@dataclass
class CrawlerConfig:
    """Crawler configuration settings."""
    limit: int = 50
    redirects: int = 3
    request_timeout: float = 30.0
    user_agent: str = "search-engine-crawler/1.0"


@dataclass
class OutputConfig:
    """Default paths for the JSON snapshots."""
    index_path: str = "index.json"
    counts_path: str = "counts.json"
    results_path: str = "results.json"


@dataclass
class ServerConfig:
    """Search server configuration settings."""
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class SystemConfig:
    """Main system configuration."""
    threads: int = DEFAULT_THREADS
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def work_queue_config(self) -> WorkQueueConfig:
        """Work queue settings, falling back to the default thread count."""
        return WorkQueueConfig.from_thread_count(self.threads)


# Configuration schema for validation
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "threads": {"type": "integer"},
        "crawler": {
            "type": "object",
            "properties": {
                "limit": {"type": "integer", "minimum": 1},
                "redirects": {"type": "integer", "minimum": 0, "maximum": 20},
                "request_timeout": {"type": "number", "exclusiveMinimum": 0, "maximum": 300},
                "user_agent": {"type": "string", "minLength": 1}
            },
            "additionalProperties": False
        },
        "output": {
            "type": "object",
            "properties": {
                "index_path": {"type": "string", "minLength": 1},
                "counts_path": {"type": "string", "minLength": 1},
                "results_path": {"type": "string", "minLength": 1}
            },
            "additionalProperties": False
        },
        "server": {
            "type": "object",
            "properties": {
                "host": {"type": "string", "minLength": 1},
                "port": {"type": "integer", "minimum": 1, "maximum": 65535}
            },
            "additionalProperties": False
        },
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        },
        "log_file": {"type": ["string", "null"]}
    },
    "additionalProperties": False
}


def _load_env_file(env_file: Path = Path('.env')) -> None:
    """Copy KEY=VALUE lines of a .env file into the environment."""
    if not env_file.exists():
        return

    try:
        with open(env_file, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    os.environ[key.strip()] = value.strip()
        logging.info("Loaded environment variables from .env file")
    except OSError as e:
        logging.warning(f"Failed to load .env file: {e}")


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be an integer",
                                 {"name": name, "value": value})


class ConfigManager:
    """Configuration manager with schema validation and environment overrides."""

    def __init__(self, config_path: str = "config.json"):
        self.config_path = Path(config_path)
        self._config: Optional[SystemConfig] = None
        self._last_modified: Optional[float] = None
        self._lock = threading.RLock()

    def validate_config(self, config_data: Dict[str, Any]) -> None:
        """Validate configuration data against schema."""
        try:
            validate(instance=config_data, schema=CONFIG_SCHEMA)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e.message}",
                                     {"path": list(e.absolute_path)})

    def load_config(self) -> SystemConfig:
        """Load configuration from file or environment variables."""
        with self._lock:
            # Check if config file exists and has been modified
            if self.config_path.exists():
                current_modified = self.config_path.stat().st_mtime
                if self._config is None or current_modified != self._last_modified:
                    self._load_from_file()
                    self._last_modified = current_modified
            elif self._config is None:
                # Load from environment variables if no config file
                self._load_from_env()

            return self._config or SystemConfig()

    def _load_from_file(self) -> None:
        """Load configuration from JSON file with validation."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}")

        self.validate_config(config_data)

        self._config = self._dict_to_config(config_data)
        self._override_with_env_vars()

        logging.info(f"Configuration loaded and validated from {self.config_path}")

    def _override_with_env_vars(self) -> None:
        """Override configuration with environment variables."""
        _load_env_file()

        threads = _env_int("SEARCH_THREADS")
        if threads is not None:
            self._config.threads = threads

        limit = _env_int("SEARCH_CRAWL_LIMIT")
        if limit is not None:
            self._config.crawler.limit = limit

        port = _env_int("SEARCH_SERVER_PORT")
        if port is not None:
            self._config.server.port = port

        log_level = os.getenv("SEARCH_LOG_LEVEL")
        if log_level:
            log_level = log_level.strip().upper()
            allowed = CONFIG_SCHEMA["properties"]["log_level"]["enum"]
            if log_level not in allowed:
                raise ConfigurationError(f"Environment variable SEARCH_LOG_LEVEL must be one of {allowed}",
                                         {"name": "SEARCH_LOG_LEVEL", "value": log_level})
            self._config.log_level = log_level

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        self._config = SystemConfig()
        self._override_with_env_vars()
        logging.info("Configuration loaded from environment variables")

    def _dict_to_config(self, data: Dict[str, Any]) -> SystemConfig:
        """Convert dictionary to SystemConfig object."""
        config = SystemConfig()

        if "crawler" in data:
            config.crawler = CrawlerConfig(**data["crawler"])

        if "output" in data:
            config.output = OutputConfig(**data["output"])

        if "server" in data:
            config.server = ServerConfig(**data["server"])

        config.threads = data.get("threads", config.threads)
        config.log_level = data.get("log_level", config.log_level)
        config.log_file = data.get("log_file", config.log_file)

        return config

    def reload_if_changed(self) -> bool:
        """Check if config file has changed and reload if necessary."""
        with self._lock:
            if not self.config_path.exists():
                return False

            current_modified = self.config_path.stat().st_mtime
            if current_modified != self._last_modified:
                self.load_config()
                return True
            return False

    def export_config(self) -> Dict[str, Any]:
        """Export current configuration as dictionary."""
        with self._lock:
            if not self._config:
                return {}

            return {
                "threads": self._config.threads,
                "crawler": asdict(self._config.crawler),
                "output": asdict(self._config.output),
                "server": asdict(self._config.server),
                "log_level": self._config.log_level,
                "log_file": self._config.log_file
            }

    def save_config(self, config_path: Optional[str] = None) -> None:
        """Save current configuration to file."""
        with self._lock:
            if not self._config:
                raise ConfigurationError("No configuration loaded to save")

            save_path = Path(config_path) if config_path else self.config_path
            config_dict = self.export_config()

            # Validate before saving
            self.validate_config(config_dict)

            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)

            logging.info(f"Configuration saved to {save_path}")


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> SystemConfig:
    """Get the current system configuration."""
    return config_manager.load_config()


def reload_config() -> SystemConfig:
    """Force reload configuration and return updated config."""
    config_manager._config = None
    config_manager._last_modified = None
    return config_manager.load_config()
