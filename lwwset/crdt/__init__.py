from .lww_element_set import LWWElementSet
from .timestamped_gset import TimestampedGrowSet

__all__ = ["LWWElementSet", "TimestampedGrowSet"]
