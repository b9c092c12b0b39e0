"""Defaulting and schema validation for clone configurations."""

from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from .constants import DEFAULT_PROGRESS_CHECK_INTERVAL_SECONDS
from .models import CloneConfig

CONFIG_DEFAULTS: Dict[str, Any] = {
    "progress_check_interval_in_seconds": DEFAULT_PROGRESS_CHECK_INTERVAL_SECONDS,
}


def fill_config_defaults(config: Any) -> Any:
    """Return a copy of ``config`` with missing optional values filled in.

    Keys that are present are kept as given, even when their value is invalid;
    validation is a separate step. Anything that is not a mapping is returned
    unchanged so the validator can report it.
    """
    if not isinstance(config, Mapping):
        return config
    filled = dict(CONFIG_DEFAULTS)
    filled.update(config)
    return filled


class ConfigValidator:
    """Validates a defaulted configuration against the CloneConfig schema."""

    def validate(self, config: Any) -> List[str]:
        """Return a list of violations; an empty list means the config is valid."""
        try:
            CloneConfig.model_validate(config)
        except ValidationError as exc:
            return [self._format_error(error) for error in exc.errors()]
        return []

    @staticmethod
    def _format_error(error: Mapping[str, Any]) -> str:
        location = ".".join(str(part) for part in error.get("loc", ())) or "config"
        return f"{location}: {error.get('msg', 'invalid value')}"
