"""
Reference replica scenarios.

Each scenario drives one or two sets through a fixed sequence of
operations and returns a result dict with every check it made, so
callers (the demo entry point, tests) can report on them.
"""

from datetime import datetime, timedelta, timezone
import uuid

from .crdt import LWWElementSet, TimestampedGrowSet

# 2001-01-01T00:00:00Z; scenario timestamps count forward from here
EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


def scenario_timestamps(step_minutes=10, count=6):
    """Evenly spaced timestamps t0..t(count-1), `step_minutes` apart."""
    return [EPOCH + timedelta(minutes=i * step_minutes) for i in range(count)]


def _check(checks, description, expected, actual):
    checks.append(
        {
            "description": description,
            "expected": expected,
            "actual": actual,
            "ok": expected == actual,
        }
    )


def _result(name, started_at, checks, state):
    return {
        "action_id": str(uuid.uuid4()),
        "scenario": name,
        "status": "passed" if all(c["ok"] for c in checks) else "failed",
        "started_at": started_at,
        "finished_at": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
        "state": state,
    }


def run_grow_set_scenario(step_minutes=10):
    """Single grow-only set: add monotonicity, subset compare, merge."""
    started_at = datetime.now(timezone.utc).isoformat()
    t = scenario_timestamps(step_minutes)
    checks = []

    g1 = TimestampedGrowSet()
    g2 = TimestampedGrowSet()

    g1.add(1, t[0])
    g1.add(2, t[0])
    g1.add(2, t[1])
    g1.add(3, t[1])
    g1.add(3, t[0])
    _check(checks, "added item returns its timestamp", t[0], g1.lookup(1))
    _check(checks, "later add advances the timestamp", t[1], g1.lookup(2))
    _check(checks, "earlier add leaves the timestamp", t[1], g1.lookup(3))
    _check(checks, "never added item is absent", None, g1.lookup(4))

    g2.add(2, t[0])
    g2.add(3, t[2])
    _check(checks, "set is a subset of itself", True, g1.compare(g1))
    _check(checks, "empty set is a subset of anything", True, TimestampedGrowSet().compare(g1))
    _check(checks, "extra key breaks the subset", False, g1.compare(g2))
    _check(checks, "fewer keys is a subset", True, g2.compare(g1))

    g2.add(4, t[0])
    g1.merge(g2)
    _check(checks, "key only on this side is unchanged", t[0], g1.lookup(1))
    _check(checks, "older remote timestamp does not win", t[1], g1.lookup(2))
    _check(checks, "newer remote timestamp wins", t[2], g1.lookup(3))
    _check(checks, "remote-only key is added", t[0], g1.lookup(4))
    _check(checks, "key on neither side stays absent", None, g1.lookup(5))

    return _result("grow_set", started_at, checks, g1.to_dict())


def run_element_set_scenario(step_minutes=10, replica_id="replica-1"):
    """Single replica add/remove sequence, including the tie-break."""
    started_at = datetime.now(timezone.utc).isoformat()
    t = scenario_timestamps(step_minutes)
    checks = []

    s = LWWElementSet(replica_id)

    s.remove(1, t[3])
    _check(checks, "remove of a missing item is dropped", None, s.lookup(1))

    s.add(1, t[1])
    _check(checks, "added item returns its timestamp", t[1], s.lookup(1))

    s.add(1, t[0])
    _check(checks, "older add does not move the timestamp", t[1], s.lookup(1))

    s.remove(1, t[0])
    _check(checks, "remove before the latest add is outvoted", t[1], s.lookup(1))

    s.remove(1, t[1])
    _check(checks, "remove at the same time as the add wins", None, s.lookup(1))

    s.add(1, t[2])
    _check(checks, "add after the remove brings the item back", t[2], s.lookup(1))

    s.remove(1, t[3])
    _check(checks, "remove after the add removes the item", None, s.lookup(1))

    return _result("element_set", started_at, checks, s.to_dict())


def run_merge_scenario(step_minutes=10):
    """Two replicas diverge, then merge; later removes beat earlier adds."""
    started_at = datetime.now(timezone.utc).isoformat()
    t = scenario_timestamps(step_minutes)
    checks = []

    r1 = LWWElementSet("replica-1")
    r1.remove(1, t[3])
    r1.add(1, t[1])
    r1.remove(1, t[1])
    r1.add(1, t[2])
    r1.remove(1, t[3])

    r2 = LWWElementSet("replica-2")
    r2.add(1, t[0])
    r2.remove(1, t[5])
    r2.add(2, t[1])
    r2.remove(2, t[0])

    _check(checks, "set is a subset of itself", True, r1.compare(r1))
    _check(checks, "empty set is a subset of anything", True, LWWElementSet().compare(r1))
    _check(checks, "replica 1 keys are contained in replica 2", True, r1.compare(r2))
    _check(checks, "replica 2 has the extra key 2", False, r2.compare(r1))

    r1.add(1, t[4])
    r1.merge(r2)
    _check(checks, "remove on one replica after every add wins", None, r1.lookup(1))
    _check(checks, "add after its remove survives the merge", t[1], r1.lookup(2))

    return _result("merge", started_at, checks, r1.to_dict())


def run_all(step_minutes=10, replica_id="replica-1"):
    return [
        run_grow_set_scenario(step_minutes),
        run_element_set_scenario(step_minutes, replica_id=replica_id),
        run_merge_scenario(step_minutes),
    ]
