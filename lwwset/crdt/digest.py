from datetime import datetime, timezone
import hashlib
import json
import math
import numbers


def canonical(value):
    """Stable text form of an element or timestamp for hashing.

    Values that compare equal map to the same text: aware datetimes are
    normalised to UTC, integral numbers drop their float form, and
    unordered collections are sorted by member text.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return f"dt:{value.isoformat()}"
    if isinstance(value, numbers.Real):
        if math.isfinite(value) and value == int(value):
            return f"n:{int(value)}"
        return f"n:{float(value)!r}"
    if isinstance(value, str):
        return f"s:{value}"
    if isinstance(value, (set, frozenset)):
        return "set:" + json.dumps(sorted(canonical(v) for v in value))
    if isinstance(value, tuple):
        return "tuple:" + json.dumps([canonical(v) for v in value])
    return f"r:{value!r}"


def leaf_hash(prefix, element, timestamp):
    raw = json.dumps([prefix, canonical(element), canonical(timestamp)])
    return hashlib.sha256(raw.encode()).hexdigest()


def merkle_root(leaves):
    """Fold leaf hashes pairwise into one root hash.

    Leaves are sorted first so the root does not depend on dict insertion
    order. An empty state has a fixed root.
    """
    leaves = sorted(leaves)
    if not leaves:
        return hashlib.sha256(b"empty").hexdigest()

    while len(leaves) > 1:
        next_level = []
        for i in range(0, len(leaves), 2):
            left = leaves[i]
            right = leaves[i + 1] if i + 1 < len(leaves) else left
            combined = hashlib.sha256((left + right).encode()).hexdigest()
            next_level.append(combined)
        leaves = next_level

    return leaves[0]
