"""
LWW-Element-Set (Last-Write-Wins Element Set) CRDT.

Internally composed of two timestamped grow-only sets: an add log and a
remove log. An element is present if its latest add is strictly later
than its latest remove. Equal add and remove timestamps resolve to
removed (remove wins ties).

Merge merges both logs independently, so the set inherits the
idempotent, commutative, associative join of the underlying logs.

Timestamps come from the caller and must be ordered meaningfully across
replicas (synchronized clocks or a logical clock). Clock skew between
replicas is not detected.
"""

from typing import Any, Dict, Generic, Hashable, Optional, Set, TypeVar

import structlog

from ..models import ElementSetState, ElementStatus
from .digest import merkle_root
from .timestamped_gset import TimestampedGrowSet

log = structlog.get_logger()

T = TypeVar("T", bound=Hashable)


class LWWElementSet(Generic[T]):
    """
    Last-Write-Wins Element Set.

    Example:
      - add("a", t1)       -> "a" present at t1
      - remove("a", t1)    -> "a" removed (tie, remove wins)
      - add("a", t2)       -> "a" present again at t2
      - remove("b", t3)    -> dropped, "b" was never present here

    The replica_id only labels log lines and exports; it plays no part
    in merge, compare or equality.
    """

    def __init__(self, replica_id: Optional[str] = None):
        self.replica_id = replica_id
        self._adds: TimestampedGrowSet[T] = TimestampedGrowSet()
        self._removes: TimestampedGrowSet[T] = TimestampedGrowSet()
        self._log = log.bind(replica_id=replica_id)

    def lookup(self, item: T) -> Optional[Any]:
        """Return the time `item` was last added, or None if it is removed or never added."""
        add_time = self._adds.lookup(item)
        if add_time is None:
            return None
        remove_time = self._removes.lookup(item)
        if remove_time is None:
            return add_time
        if add_time > remove_time:
            return add_time
        return None

    def status(self, item: T) -> ElementStatus:
        if self._adds.lookup(item) is None:
            return ElementStatus.NEVER_SEEN
        if self.lookup(item) is None:
            return ElementStatus.REMOVED
        return ElementStatus.PRESENT

    def add(self, item: T, timestamp: Any = None) -> None:
        """Add `item` at `timestamp` (default: now). Re-adding is always allowed."""
        self._adds.add(item, timestamp)

    def remove(self, item: T, timestamp: Any = None) -> None:
        """Remove `item` at `timestamp` (default: now).

        No-op if `item` is not currently present, so no tombstone is kept
        for elements this replica never saw as live.
        """
        if self.lookup(item) is None:
            self._log.debug("remove_dropped", item=item, status=self.status(item).value)
            return
        self._removes.add(item, timestamp)

    def compare(self, other: "LWWElementSet[T]") -> bool:
        """True if both logs' keys are contained in `other`'s logs.

        A key-membership check only; it says nothing about which
        elements are present on either side.
        """
        return self._adds.compare(other._adds) and self._removes.compare(other._removes)

    def merge(self, other: "LWWElementSet[T]") -> None:
        """Merge another replica's state. Add and remove logs merge independently.

        `other` must not be mutated while the merge runs; pass a copy()
        if it is shared.
        """
        adds_changed = self._adds.merge(other._adds)
        removes_changed = self._removes.merge(other._removes)
        if adds_changed or removes_changed:
            self._log.debug(
                "element_set_merged",
                from_replica=other.replica_id,
                adds_changed=adds_changed,
                removes_changed=removes_changed,
            )

    def merged(self, other: "LWWElementSet[T]") -> "LWWElementSet[T]":
        """Return a new set holding the merge of this one and `other`."""
        result = self.copy()
        result.merge(other)
        return result

    def copy(self) -> "LWWElementSet[T]":
        c = type(self)(self.replica_id)
        c._adds = self._adds.copy()
        c._removes = self._removes.copy()
        return c

    @property
    def value(self) -> Set[T]:
        """Return the set of elements currently present."""
        return {item for item in self._adds if self.lookup(item) is not None}

    def fingerprint(self) -> str:
        """Hash of both logs, equal on replicas whose logs compare equal.

        Timestamps and elements are hashed in canonical form, so the same
        instant written in different zones, or 1 and 1.0, hash alike.
        """
        return merkle_root(["a:" + self._adds.fingerprint(), "r:" + self._removes.fingerprint()])

    def __contains__(self, item) -> bool:
        return self.lookup(item) is not None

    def __len__(self) -> int:
        return len(self.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LWWElementSet):
            return NotImplemented
        return self._adds == other._adds and self._removes == other._removes

    def __repr__(self) -> str:
        return f"{type(self).__name__}(replica_id={self.replica_id!r}, value={self.value!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "lww_element_set",
            "replica_id": self.replica_id,
            "add_log": self._adds.to_dict(),
            "remove_log": self._removes.to_dict(),
            "active_elements": list(self.value),
        }

    @classmethod
    def from_dict(cls, data) -> "LWWElementSet":
        """Rebuild a set from `to_dict()` output.

        Raises pydantic.ValidationError on malformed input.
        """
        state = ElementSetState.model_validate(data)
        s = cls(state.replica_id)
        s._adds = TimestampedGrowSet(state.add_log.timestamps)
        s._removes = TimestampedGrowSet(state.remove_log.timestamps)
        return s
