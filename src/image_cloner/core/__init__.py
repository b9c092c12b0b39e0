"""Core utilities and shared components for the image cloner."""

from .config_validator import ConfigValidator, fill_config_defaults
from .logging_config import get_logger, set_debug_logging, setup_logger
from .exceptions import (
    ImageClonerError,
    ConfigurationError,
    Ec2Error,
    ImageNotFoundError,
    UnsupportedAttributeError,
    CloneNotAttemptedError,
)
from .models import CloneConfig, CloneReport, RegionOutcome, SourceImageSnapshot

__all__ = [
    "CloneConfig",
    "CloneReport",
    "RegionOutcome",
    "SourceImageSnapshot",
    "ConfigValidator",
    "fill_config_defaults",
    "setup_logger",
    "get_logger",
    "set_debug_logging",
    "ImageClonerError",
    "ConfigurationError",
    "Ec2Error",
    "ImageNotFoundError",
    "UnsupportedAttributeError",
    "CloneNotAttemptedError",
]
