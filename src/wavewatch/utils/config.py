"""Configuration management for the wavewatch detector."""

import logging
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


class WaveParameters(BaseModel):
    """Tunable numbers read by every pipeline tick."""
    contrast_factor: float = Field(default=3.0, ge=0.0, allow_inf_nan=False)
    max_interval: int = Field(default=10, ge=1)  # ticks between transitions
    transition_count_threshold: int = Field(default=4, ge=0, le=255)
    # fraction of the full 3x3 neighbourhood
    outlier_threshold: float = Field(default=0.5, ge=0.0, le=1.0)


class MonitorConfig(BaseModel):
    """Configuration for individual monitors."""
    enabled: bool = True
    update_rate_hz: float = Field(default=10.0, gt=0.0)
    timeout_seconds: float = 1.0

    model_config = {"extra": "allow"}  # Allow extra fields


class WaveMonitorConfig(MonitorConfig):
    """Configuration for the wave detection monitor."""
    update_rate_hz: float = Field(default=20.0, gt=0.0)
    parameters: WaveParameters = Field(default_factory=WaveParameters)
    render_debug: bool = False  # attach RGBA debug buffers to each output
    history_size: int = Field(default=60, ge=1)


class CameraConfig(BaseModel):
    """Configuration for the frame source."""
    device: int | str = 0
    video_path: Optional[str] = None  # use a video file instead of the webcam
    loop: bool = False
    fps: float = Field(default=20.0, gt=0.0)
    capture_width: Optional[int] = None
    capture_height: Optional[int] = None
    # Frames are downscaled to this size before processing
    width: int = Field(default=40, ge=1)
    height: int = Field(default=30, ge=1)

    @property
    def output_size(self) -> tuple[int, int]:
        return (self.width, self.height)


class DisplayConfig(BaseModel):
    """Configuration for the OpenCV debug preview."""
    show_viz: bool = False
    scale: int = Field(default=6, ge=1)
    columns: int = Field(default=4, ge=1)
    window_name: str = "wavewatch"


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = 10
    backup_count: int = 3

    @model_validator(mode="after")
    def check_level(self) -> "LoggingConfig":
        if not isinstance(logging.getLevelName(self.level.upper()), int):
            raise ValueError(f"Unknown logging level: {self.level}")
        return self


class WaveWatchConfig(BaseModel):
    """Root configuration for the wavewatch system."""

    project_name: str = "wavewatch"
    version: str = "0.1.0"
    debug_mode: bool = False

    camera: CameraConfig = Field(default_factory=CameraConfig)
    monitor: WaveMonitorConfig = Field(default_factory=WaveMonitorConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        level_name = "DEBUG" if self.debug_mode else self.logging.level.upper()
        log_level = getattr(logging, level_name)

        handlers = []

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(exist_ok=True, parents=True)

            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                log_dir / "wavewatch.log",
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            force=True
        )

        logger.info(f"Logging configured: level={level_name}")


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> WaveWatchConfig:
    """Load configuration from YAML file with optional overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default.yaml
        overrides: Dictionary of config overrides (nested keys with dots)

    Returns:
        Validated WaveWatchConfig instance

    Example:
        >>> config = load_config("config/default.yaml")
        >>> config = load_config(overrides={"monitor.parameters.max_interval": 8})
    """
    if config_path is None:
        repo_root = Path(__file__).parent.parent.parent.parent
        config_path = repo_root / "config" / "default.yaml"
    else:
        config_path = Path(config_path)

    config_dict = {}
    if config_path.exists():
        logger.info(f"Loading config from {config_path}")
        with open(config_path) as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    if overrides:
        config_dict = _apply_overrides(config_dict, overrides)

    config = WaveWatchConfig(**config_dict)
    config.setup_logging()

    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply nested overrides to config dictionary.

    Example:
        overrides = {"monitor.parameters.contrast_factor": 5.0}
        -> config_dict["monitor"]["parameters"]["contrast_factor"] = 5.0
    """
    for key, value in overrides.items():
        keys = key.split(".")
        d = config_dict
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value
    return config_dict
