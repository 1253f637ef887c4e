import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .client import Client
from .http_client import HttpTransport

logger = logging.getLogger("kairosdb.config")


@dataclass
class ClientConfig:
    """Client connection settings with defaults"""
    host: str = "localhost"
    port: int = 8080
    timeout: Optional[float] = None  # None: transport default
    log_level: str = "INFO"

    def __post_init__(self):
        # YAML may hand back strings or bools; reject what can't be used
        if isinstance(self.port, bool) or not isinstance(self.port, (int, str)):
            raise ValueError(f"invalid port: {self.port!r}")
        self.port = int(self.port)
        if not 0 <= self.port <= 2**32 - 1:
            raise ValueError(f"port out of range: {self.port}")
        if self.timeout is not None:
            self.timeout = float(self.timeout)
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level: {self.log_level!r}")

    @classmethod
    def from_file(cls, config_path: Path) -> "ClientConfig":
        """Load configuration from YAML file"""
        config_path = Path(config_path)
        if not config_path.exists():
            logger.debug("Config file not found: %s, using defaults", config_path)
            return cls()

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            logger.debug("Loaded config from %s: %s", config_path, data)
            return cls(**data)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning("Failed to load config from %s: %s, using defaults", config_path, e)
            return cls()

    def create_client(self) -> Client:
        return Client(self.host, self.port, transport=HttpTransport(timeout=self.timeout))

    def apply_log_level(self) -> None:
        # library logger only, handlers are left to the application
        logging.getLogger("kairosdb").setLevel(self.log_level)
