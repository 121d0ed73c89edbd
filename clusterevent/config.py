"""
Sender configuration.

Settings are read from a YAML file shaped like:

    sender:
      host: 127.0.0.1
      port: 41003
      name: Sender
      connect_attempts: 3
      retry_delay_ms: 500
      buffer_size: 4194304
      timeout: 5.0
"""

import ipaddress
from dataclasses import dataclass, fields
from typing import Any, Optional, Self

import yaml

from .exceptions import ClusterConfigurationError
from .io.frame import FrameConst


@dataclass
class SenderConfig:
    """Where to send events and how hard to try"""
    host: str
    port: int
    name: str = "Sender"
    connect_attempts: int = 1
    retry_delay_ms: float = 0.0
    buffer_size: int = FrameConst.DEFAULT_BUFFER_SIZE
    timeout: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.host, str):
            raise ClusterConfigurationError(f"Invalid IPv4 address in sender config: {self.host!r}")
        try:
            ipaddress.IPv4Address(self.host)
        except ValueError:
            raise ClusterConfigurationError(f"Invalid IPv4 address in sender config: {self.host}") from None
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 1 <= self.port <= 65535:
            raise ClusterConfigurationError(f"Invalid port number in sender config: {self.port}")
        if not isinstance(self.name, str) or not self.name:
            raise ClusterConfigurationError("Sender name must be a non-empty string")
        if isinstance(self.connect_attempts, bool) or not isinstance(self.connect_attempts, int) or self.connect_attempts < 0:
            raise ClusterConfigurationError(f"connect_attempts must be 0 (unlimited) or more, got {self.connect_attempts}")
        if not isinstance(self.retry_delay_ms, (int, float)) or self.retry_delay_ms < 0:
            raise ClusterConfigurationError(f"retry_delay_ms must be a non-negative number, got {self.retry_delay_ms}")
        if not isinstance(self.buffer_size, int) or self.buffer_size <= FrameConst.HEADER_SIZE:
            raise ClusterConfigurationError(f"buffer_size must be larger than {FrameConst.HEADER_SIZE} bytes, got {self.buffer_size}")
        if self.timeout is not None and (not isinstance(self.timeout, (int, float)) or self.timeout <= 0):
            raise ClusterConfigurationError(f"timeout must be a positive number of seconds, got {self.timeout}")

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        if not isinstance(config, dict):
            raise ClusterConfigurationError("sender config must be a mapping")
        required = ['host', 'port']
        missing = [f for f in required if f not in config]
        if missing:
            raise ClusterConfigurationError(f"Missing sender config fields: {', '.join(missing)}")
        known = {f.name for f in fields(cls)}
        unknown = [k for k in config if k not in known]
        if unknown:
            raise ClusterConfigurationError(f"Unknown sender config fields: {', '.join(map(str, unknown))}")
        return cls(**config)


def load_config(path: str) -> SenderConfig:
    """Load the sender section of a YAML config file"""
    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ClusterConfigurationError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ClusterConfigurationError(f"Failed to parse config file {path}: {e}") from e

    if not isinstance(config, dict) or 'sender' not in config:
        raise ClusterConfigurationError(f"Missing required config section in {path}: sender")
    return SenderConfig.from_dict(config['sender'])
