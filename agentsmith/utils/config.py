"""Global configuration settings."""

import copy
from typing import Dict, Any


_DEFAULTS: Dict[str, Any] = {
    # Buffer settings for freshly constructed matrices
    "matrix": {
        "dtype": "float32",
        "layout": "row_major",
    },
    # Comparison settings
    "compare": {
        "tolerance": 0.01,  # nearly_equals band, strict |a - b| < tolerance
    },
}


class Config:
    """
    Global configuration for AgentSmith.

    Keys are addressed with dotted paths, e.g. ``Config.get("compare.tolerance")``.
    """

    _config: Dict[str, Any] = copy.deepcopy(_DEFAULTS)

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        keys = key.split(".")
        value = cls._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k, default)
            else:
                return default
        return value

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Set configuration value."""
        keys = key.split(".")
        config = cls._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    @classmethod
    def reset(cls) -> None:
        """Reset to default configuration."""
        cls._config = copy.deepcopy(_DEFAULTS)
