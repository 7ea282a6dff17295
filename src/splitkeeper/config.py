"""Configuration management for splitkeeper."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field

from .constants import CONFIG_FILE
from .formatting import Accuracy
from .models import BuiltinComparison, TimingMethod


class TimerConfig(BaseModel):
    """Defaults applied to newly created timers."""

    timing_method: TimingMethod = TimingMethod.REAL_TIME
    comparison: str = BuiltinComparison.PERSONAL_BEST.value


class ComparisonsConfig(BaseModel):
    """Configuration for history-based comparisons."""

    history_window: int | None = Field(
        default=None, ge=1, description="Only use the last N attempts (all when unset)"
    )


class DisplayConfig(BaseModel):
    """Configuration for time display in the CLI."""

    accuracy: Accuracy = Accuracy.HUNDREDTHS
    show_days: bool = False  # Roll hours over into days for very long runs
    show_region: bool = False
    show_platform: bool = False


class SplitkeeperConfig(BaseModel):
    """Root configuration for splitkeeper."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    comparisons: ComparisonsConfig = Field(default_factory=ComparisonsConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def load_config(config_dir: Path) -> SplitkeeperConfig:
    """Load config from <config_dir>/config.toml.

    Args:
        config_dir: Path to .splitkeeper directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist
    """
    config_path = config_dir / CONFIG_FILE
    if not config_path.exists():
        return SplitkeeperConfig()
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return SplitkeeperConfig.model_validate(data)


def write_config_template(config_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        config_dir: Path to .splitkeeper directory

    Returns:
        Path to the written config file
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILE
    template = {
        "timer": {
            "timing_method": TimingMethod.REAL_TIME.value,
            "comparison": BuiltinComparison.PERSONAL_BEST.value,
        },
        # history_window limits Average/Median/Worst Segments to the last N attempts
        "comparisons": {"history_window": 10},
        "display": {
            "accuracy": Accuracy.HUNDREDTHS.value,
            "show_days": False,
            "show_region": False,
            "show_platform": False,
        },
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
