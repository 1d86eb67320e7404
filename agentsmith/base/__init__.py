"""Base utilities for buffer reshaping, broadcasting rules and labelling."""

from agentsmith.base.array_wrapper import ArrayWrapper
from agentsmith.base.reshape_fns import broadcast_relation, to_1d, to_2d

__all__ = [
    "ArrayWrapper",
    "broadcast_relation",
    "to_1d",
    "to_2d",
]
