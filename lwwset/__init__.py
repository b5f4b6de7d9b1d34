"""
State-based LWW-Element-Set CRDT.

Replicas accept adds and removes independently and converge by merging
their add and remove logs.
"""

from .crdt import LWWElementSet, TimestampedGrowSet
from .models import ElementSetState, ElementStatus, GrowSetState

__all__ = [
    "LWWElementSet",
    "TimestampedGrowSet",
    "ElementStatus",
    "ElementSetState",
    "GrowSetState",
]

__version__ = "0.1.0"
