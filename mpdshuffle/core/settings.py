# mpdshuffle/core/settings.py
"""
Runtime settings for mpdshuffle.

Values come from the environment first (MPD_HOST / MPD_PORT, the same
variables mpc and friends use) and are then overridden by CLI flags.
MPD_HOST may carry a password in the "password@host" form.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
DEFAULT_WINDOW_SIZE = 7


class ConfigError(ValueError):
    """Raised for invalid user configuration (tags, rules, sizes, ports)."""


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: Optional[str] = None
    timeout: float = 10.0
    window_size: int = DEFAULT_WINDOW_SIZE
    queue_buffer: int = 0

    def __post_init__(self):
        if not self.host:
            raise ConfigError("MPD host must not be empty")
        if not (0 < int(self.port) < 65536):
            raise ConfigError(f"invalid MPD port: {self.port}")
        if self.window_size < 1:
            raise ConfigError(f"window size must be at least 1, got {self.window_size}")
        if self.queue_buffer < 0:
            raise ConfigError(f"queue buffer must not be negative, got {self.queue_buffer}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        host, password = split_host(env.get("MPD_HOST") or DEFAULT_HOST)
        port = _parse_port(env.get("MPD_PORT")) if env.get("MPD_PORT") else DEFAULT_PORT
        return cls(host=host, port=port, password=password)

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-None value in `changes` applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "host" in changes:
            host, password = split_host(changes["host"])
            changes["host"] = host
            if password is not None:
                changes["password"] = password
        return replace(self, **changes)


def split_host(value: str):
    """Split "password@host" into (host, password). Password is None if absent."""
    # unix socket paths may contain '@', so only split on the first one
    # and only when something is left on both sides
    if "@" in value and not value.startswith("/"):
        password, _, host = value.partition("@")
        if password and host:
            return host, password
    return value, None


def _parse_port(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"invalid MPD port: {value!r}") from None
