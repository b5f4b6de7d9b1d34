"""
Timestamped grow-only set.

A G-Set where every element remembers the time of its latest addition.
Elements are never deleted; only their timestamp can move forward.
Merge = per-element max, so it is idempotent, commutative and associative.

Used twice inside LWWElementSet: once as the add log, once as the
remove log.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, Hashable, Iterator, List, Optional, Tuple, TypeVar

import structlog

from ..models import GrowSetState
from .digest import leaf_hash, merkle_root

log = structlog.get_logger()

T = TypeVar("T", bound=Hashable)


def now():
    """Default timestamp source when the caller does not supply one."""
    return datetime.now(timezone.utc)


class TimestampedGrowSet(Generic[T]):
    """
    Grow-only set of element -> latest add timestamp.

    Timestamps are opaque: anything totally ordered works (datetimes,
    integers from a logical clock, ...). All timestamps in one set must be
    mutually comparable.
    """

    def __init__(self, timestamps: Optional[Dict[T, Any]] = None):
        """Raises pydantic.ValidationError if any timestamp is None."""
        if timestamps:
            timestamps = GrowSetState(timestamps=timestamps).timestamps
        self._timestamps: Dict[T, Any] = dict(timestamps) if timestamps else {}

    def lookup(self, item: T) -> Optional[Any]:
        """Return the time `item` was last added, or None if never added."""
        return self._timestamps.get(item)

    def add(self, item: T, timestamp: Any = None) -> bool:
        """Record `item` at `timestamp` (default: now).

        Ties and older timestamps are ignored. Returns True if the stored
        timestamp changed.
        """
        if timestamp is None:
            timestamp = now()
        previous = self._timestamps.get(item)
        if previous is not None and previous >= timestamp:
            log.debug("stale_add_ignored", item=item, stored=previous, offered=timestamp)
            return False
        self._timestamps[item] = timestamp
        return True

    def compare(self, other: "TimestampedGrowSet[T]") -> bool:
        """True if every key here is also a key in `other`.

        Only key membership is checked, timestamps are not compared: two
        sets with the same keys are subsets of each other even when their
        timestamps differ.
        """
        return all(other.lookup(item) is not None for item in self._timestamps)

    def merge(self, other: "TimestampedGrowSet[T]") -> int:
        """Merge another set into this one, keeping the later timestamp per key.

        Returns the number of keys that were added or advanced.
        """
        changed = 0
        for item, timestamp in other._timestamps.items():
            current = self._timestamps.get(item)
            if current is None or timestamp > current:
                self._timestamps[item] = timestamp
                changed += 1
        return changed

    def merged(self, other: "TimestampedGrowSet[T]") -> "TimestampedGrowSet[T]":
        """Return a new set holding the merge of this one and `other`."""
        result = self.copy()
        result.merge(other)
        return result

    def copy(self) -> "TimestampedGrowSet[T]":
        return type(self)(self._timestamps)

    def items(self) -> List[Tuple[T, Any]]:
        """Snapshot of (element, timestamp) pairs, for export."""
        return list(self._timestamps.items())

    def fingerprint(self) -> str:
        return merkle_root(
            leaf_hash("g", item, timestamp) for item, timestamp in self._timestamps.items()
        )

    def __contains__(self, item) -> bool:
        return item in self._timestamps

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._timestamps))

    def __len__(self) -> int:
        return len(self._timestamps)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimestampedGrowSet):
            return NotImplemented
        return self._timestamps == other._timestamps

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._timestamps!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "timestamped_gset",
            "timestamps": dict(self._timestamps),
            "size": len(self._timestamps),
        }

    @classmethod
    def from_dict(cls, data) -> "TimestampedGrowSet":
        """Rebuild a set from `to_dict()` output.

        Raises pydantic.ValidationError on malformed input.
        """
        state = GrowSetState.model_validate(data)
        return cls(state.timestamps)
