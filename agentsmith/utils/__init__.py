"""Utility functions and helpers."""

from agentsmith.utils.config import Config

__all__ = [
    "Config",
]
