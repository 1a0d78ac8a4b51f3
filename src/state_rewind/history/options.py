"""Construction-time configuration for history managers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from state_rewind.runtime import telemetry

DEFAULT_HISTORY_LOGGER = "state_rewind.history"


@dataclass(frozen=True, slots=True)
class RewindOptions:
    """Toggles diagnostic tracing; has no effect on history semantics."""

    log: bool = False
    logger_name: Optional[str] = None

    @property
    def resolved_logger_name(self) -> str:
        return self.logger_name or DEFAULT_HISTORY_LOGGER

    @classmethod
    def from_env(cls) -> "RewindOptions":
        """Read ``STATE_REWIND_TRACE`` and ``STATE_REWIND_TRACE_LOGGER``."""

        return cls(
            log=telemetry.env_flag("TRACE", False),
            logger_name=telemetry.env_value("TRACE_LOGGER") or None,
        )


__all__ = ["DEFAULT_HISTORY_LOGGER", "RewindOptions"]
