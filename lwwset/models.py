from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ElementStatus(str, Enum):
    """Observable status of one element, derived from the add and remove logs."""

    NEVER_SEEN = "never_seen"  # no entry in the add log
    PRESENT = "present"  # added, and the latest add is strictly after any remove
    REMOVED = "removed"  # a remove at or after the latest add


class GrowSetState(BaseModel):
    """Exported state of a TimestampedGrowSet.

    Element and timestamp values are kept as native Python objects.
    Encoding them for transport is left to the caller.
    """

    type: Literal["timestamped_gset"] = "timestamped_gset"
    timestamps: Dict[Any, Any] = Field(default_factory=dict)

    @field_validator("timestamps")
    @classmethod
    def timestamps_not_null(cls, value):
        missing = [item for item, timestamp in value.items() if timestamp is None]
        if missing:
            raise ValueError(f"missing timestamp for elements: {missing!r}")
        return value


class ElementSetState(BaseModel):
    """Exported state of an LWWElementSet. Derived fields are ignored on import."""

    type: Literal["lww_element_set"] = "lww_element_set"
    replica_id: Optional[str] = None
    add_log: GrowSetState
    remove_log: GrowSetState = Field(default_factory=GrowSetState)
