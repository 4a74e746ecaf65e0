"""sockpoll 配置模型。"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from sockpoll.errors import ConfigurationError

__all__ = ["Target", "PollConfig", "build_config"]

DEFAULT_INTERVAL = 0.25


class Target(BaseModel):
    """TCP endpoint to probe.

    ``port`` accepts anything pydantic can coerce to an integer ("4444" works,
    "abc" does not).
    """

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class PollConfig(BaseModel):
    """Timing configuration for a single wait operation."""

    timeout: int = Field(default=0, ge=0)  # seconds
    interval: float = Field(default=DEFAULT_INTERVAL, ge=0)  # seconds
    debug: bool = False  # log every failed probe

    model_config = {"frozen": True}

    @property
    def has_spin_hazard(self) -> bool:
        """True when a zero interval would spin for the whole timeout."""
        return self.interval == 0 and self.timeout > 0


def _first_error_field(exc: ValidationError) -> tuple[str, str]:
    error = exc.errors()[0]
    loc = error.get("loc") or ("value",)
    return str(loc[0]), error.get("msg", str(exc))


def build_config(
    host: Any,
    port: Any,
    timeout: Any = 0,
    interval: Any = DEFAULT_INTERVAL,
    debug: bool = False,
) -> tuple[Target, PollConfig]:
    """Validate raw poller arguments.

    Args:
        host: Hostname or IP literal
        port: Port number, or a value that parses as one
        timeout: Whole seconds to keep polling
        interval: Seconds between probes
        debug: Whether failed probes are logged

    Returns:
        The validated target and poll configuration

    Raises:
        ConfigurationError: If any argument fails validation
    """
    try:
        target = Target(host=host, port=port)
        config = PollConfig(timeout=timeout, interval=interval, debug=debug)
    except ValidationError as e:
        field, message = _first_error_field(e)
        raise ConfigurationError(field, message) from e
    return target, config
