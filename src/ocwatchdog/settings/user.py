"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import ClassVar, Final

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

# Load environment variables from .env file(s)
load_dotenv()

logger: Final = logging.getLogger(__name__)

DEFAULT_TIME_API_URL: Final = "http://worldtimeapi.org/api/timezone/Etc/UTC"


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class RetryPolicy(BaseModel):
    """How the poll loop reacts to consecutive time-source failures.

    The defaults retry forever at the normal poll interval.
    """

    max_attempts: int | None = Field(
        None,
        gt=0,
        description="Consecutive failures before giving up (null = retry forever)",
    )
    backoff_factor: float = Field(
        1.0, ge=1.0, description="Multiplier applied to the interval per extra failure"
    )
    max_delay: int | None = Field(None, gt=0, description="Upper bound on the delay (seconds)")

    def delay_for(self, interval: int, failures: int) -> float:
        """Seconds to wait before the next cycle.

        Args:
            interval: Base poll interval in seconds
            failures: Current consecutive failure count (0 after a success)

        Returns:
            Delay in seconds
        """
        if failures <= 1:
            delay = float(interval)
        else:
            delay = interval * self.backoff_factor ** (failures - 1)
        if self.max_delay is not None:
            delay = min(delay, float(self.max_delay))
        return delay

    def is_exhausted(self, failures: int) -> bool:
        """Whether the loop should stop after ``failures`` consecutive failures."""
        return self.max_attempts is not None and failures >= self.max_attempts


class RedstoneSettings(BaseModel):
    """Options for the redstone signal used as the restart actuator."""

    enabled: bool = Field(True, description="Drive the redstone signal at all")
    frequency: int = Field(1, description="Wireless redstone frequency (tier 2 only)")
    default_side: int = Field(0, ge=0, le=5, description="Side for basic I/O (0 = bottom)")
    bundled_color: int = Field(0, ge=0, le=15, description="Bundled cable color channel")
    fallback_on_failure: bool = Field(
        True, description="Fall back to basic side output when wireless output fails"
    )
    use_wireless: bool = Field(True, description="Prefer wireless output when available")


class PumpSettings(BaseModel):
    """Timing for the fluid pump balancing routine."""

    settle_seconds: float = Field(1.0, ge=0, description="Wait after stopping the pump")
    sample_seconds: float = Field(10.0, gt=0, description="Pump time used to measure the rate")
    max_pump_seconds: float = Field(180.0, gt=0, description="Longest single pumping run")
    idle_seconds: float = Field(180.0, ge=0, description="Wait when every fluid is full")


class WatchdogSettings(BaseModel):
    """Restart schedule and service options.

    Hours, minute and offset describe the daily restarts; the lead-times
    decide when warnings fire and when the redstone signal is switched off.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("config.yaml"),
        Path("~/.config/ocwatchdog/config.yaml").expanduser(),
        Path("/etc/ocwatchdog/config.yaml"),
    ]

    # Schedule
    hours: list[int] = Field(
        default_factory=lambda: [3, 11, 17], description="Daily restart hours (0-23)"
    )
    minute: int = Field(55, ge=0, le=59, description="Restart minute (0-59)")
    offset: int = Field(-5, ge=-12, le=14, description="UTC offset in hours")
    interval: int = Field(60, gt=0, description="Poll interval (seconds)")

    # Warnings and actions
    warn_before: list[int] = Field(
        default_factory=lambda: [900, 300, 60],
        description="Seconds before a restart at which to warn",
    )
    turn_off_before: int = Field(
        300, ge=0, description="Seconds before a restart at which the signal turns off"
    )

    # Time source
    time_api_url: str = Field(DEFAULT_TIME_API_URL, description="Endpoint returning unixtime")
    request_timeout: float = Field(10.0, gt=0, description="HTTP timeout (seconds)")

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    redstone: RedstoneSettings = Field(default_factory=RedstoneSettings)

    # ---- validators ----
    @field_validator("hours")
    @classmethod
    def validate_hours(cls, v: list[int]) -> list[int]:
        """Ensure every hour is within 0-23; de-duplicate and sort."""
        for hour in v:
            if not 0 <= hour <= 23:
                raise ValueError(f"restart hour {hour} is outside 0-23")
        return sorted(set(v))

    @field_validator("warn_before")
    @classmethod
    def validate_warn_before(cls, v: list[int]) -> list[int]:
        """Ensure lead-times are non-negative; de-duplicate, sort descending."""
        for lead in v:
            if lead < 0:
                raise ValueError(f"warning lead-time {lead} must be non-negative")
        return sorted(set(v), reverse=True)

    # ---- persistence ----
    @classmethod
    def resolve_path(cls, path: Path | None = None) -> Path | None:
        """Find the config file to use.

        Args:
            path: Explicit path (returned unchanged when given)

        Returns:
            The explicit path, $OCWATCHDOG_CONFIG, or the first existing
            default path; None when nothing was found
        """
        if path is not None:
            return path

        env_path = os.environ.get("OCWATCHDOG_CONFIG")
        if env_path:
            return Path(env_path)

        for default_path in cls.DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                return default_path
        return None

    @classmethod
    def load(cls, path: Path | None = None) -> WatchdogSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated WatchdogSettings object

        Raises:
            FileNotFoundError: If no config file is found
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        resolved = cls.resolve_path(path)
        if resolved is None:
            raise FileNotFoundError(
                "No configuration file found. Create config.yaml or set OCWATCHDOG_CONFIG."
            )
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")

        try:
            raw = _interpolate_env(resolved.read_text(encoding="utf-8"))
            data = yaml.safe_load(raw)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RuntimeError("Invalid configuration: top level must be a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err

    @classmethod
    def load_or_create(cls, path: Path | None = None) -> WatchdogSettings:
        """Load configuration, falling back to defaults.

        A missing or malformed file is replaced by the default configuration,
        which is written back to disk so the next start finds a valid file.

        Args:
            path: Path to config file (defaults to the first search path)

        Returns:
            Loaded settings, or the defaults
        """
        target = cls.resolve_path(path) or cls.DEFAULT_CONFIG_PATHS[0]

        if not target.exists():
            logger.info("No config found, creating default config at %s", target)
            return cls._write_defaults(target)

        try:
            settings = cls.load(target)
        except RuntimeError as exc:
            logger.warning("Error loading config, using default settings: %s", exc)
            return cls._write_defaults(target)

        logger.info("Config loaded from %s", target)
        return settings

    @classmethod
    def _write_defaults(cls, path: Path) -> WatchdogSettings:
        defaults = cls()
        try:
            defaults.save(path)
        except OSError as exc:
            logger.warning("Could not write default config to %s: %s", path, exc)
        return defaults

    def save(self, path: Path) -> None:
        """Write the settings to ``path`` as YAML."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False),
            encoding="utf-8",
        )
