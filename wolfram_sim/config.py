"""
Configuration for the simulation session client.

Environment Variables:
- WOLFRAM_SIM_URL: Base URL of the simulation service (default: "http://localhost:8080")
- WOLFRAM_SIM_UPDATE_INTERVAL_MS: Interval the server is asked to honor between
                                  streamed updates (default: 500)
- WOLFRAM_SIM_HISTORY_CAP: Number of events kept in the session history (default: 50)
- WOLFRAM_SIM_DEFAULT_EXAMPLE: Predefined example used by initialize() when none
                               is given (default: "single_edge")
- WOLFRAM_SIM_MAX_STEPS: Optional step limit for continuous runs
- WOLFRAM_SIM_STOP_ON_FIXED_POINT: Stop a run when no rule applies (default: false)
- WOLFRAM_SIM_REQUEST_TIMEOUT: Seconds before an HTTP call gives up (default: no timeout)

Example:
    export WOLFRAM_SIM_URL="http://sim-host:8080"
    export WOLFRAM_SIM_UPDATE_INTERVAL_MS=250
"""

from dataclasses import dataclass
from typing import Optional


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    return int(value)


def _env_optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class SimulatorConfig:
    """Configuration for the simulation client and session controller."""

    # Remote service
    server_url: str = "http://localhost:8080"
    request_timeout: Optional[float] = None  # None = wait as long as the server takes

    # Session behavior
    update_interval_ms: int = 500
    history_cap: int = 50
    default_example: str = "single_edge"

    # Continuous run options forwarded with RunSimulation
    max_steps: Optional[int] = None
    stop_on_fixed_point: bool = False

    def __post_init__(self):
        """Reject values the controller cannot work with."""
        if self.update_interval_ms <= 0:
            raise ValueError(f"update_interval_ms must be positive, got {self.update_interval_ms}")
        if self.history_cap <= 0:
            raise ValueError(f"history_cap must be positive, got {self.history_cap}")
        if self.max_steps is not None and self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive when set, got {self.max_steps}")

    @classmethod
    def from_env(cls) -> 'SimulatorConfig':
        """Load config from environment variables."""
        import os

        return cls(
            server_url=os.getenv('WOLFRAM_SIM_URL', 'http://localhost:8080'),
            request_timeout=_env_optional_float(os.getenv('WOLFRAM_SIM_REQUEST_TIMEOUT')),
            update_interval_ms=int(os.getenv('WOLFRAM_SIM_UPDATE_INTERVAL_MS', '500')),
            history_cap=int(os.getenv('WOLFRAM_SIM_HISTORY_CAP', '50')),
            default_example=os.getenv('WOLFRAM_SIM_DEFAULT_EXAMPLE', 'single_edge'),
            max_steps=_env_optional_int(os.getenv('WOLFRAM_SIM_MAX_STEPS')),
            stop_on_fixed_point=_env_bool(os.getenv('WOLFRAM_SIM_STOP_ON_FIXED_POINT')),
        )


# Default configuration
DEFAULT_CONFIG = SimulatorConfig()
