"""
Validation of a configured schedule.
"""

from meshsched.intervals import to_start_stop
from meshsched.schedule import OVERFLOW_TOLERANCE


def validate_schedule(topology, schedule_time) -> None:
    """
    Structural checks on a schedule built by configure_schedule:
    - every clique comes after its master clique
    - intervals lie inside [0, schedule_time)
    - non-reused segments of one clique never overlap
    - no clique uses more time than it owns
    """
    _ensure_topological_order(topology)
    for clique in topology.budget_cliques():
        _ensure_inside_schedule(clique, schedule_time)
        _ensure_disjoint(clique)
        _ensure_budget(clique, schedule_time)


def _ensure_topological_order(topology) -> None:
    seen = set()
    for c in topology.scheduling_order:
        master_clique = topology.cliques[c].master_clique
        if master_clique is not None and master_clique not in seen:
            raise ValueError("Clique {} is scheduled before its master clique {}.".format(c, master_clique))
        seen.add(c)

    missing = [c for c in range(topology.interference_start) if c not in seen]
    if missing:
        raise ValueError("Cliques {} are missing from the scheduling order.".format(missing))


def _ensure_inside_schedule(clique, schedule_time) -> None:
    for buffered in clique.buffered:
        for start, stop in to_start_stop(buffered):
            if start < 0 or stop > schedule_time or stop <= start:
                raise ValueError("Interval [{}, {}) of clique {} lies outside the schedule.".format(start, stop, clique.clique_id))


def _ensure_disjoint(clique) -> None:
    intervals = []
    for i, buffered in enumerate(clique.buffered):
        if not clique.reused[i]:
            intervals += to_start_stop(buffered)

    intervals.sort()
    for (_, prev_stop), (start, _) in zip(intervals, intervals[1:]):
        if start < prev_stop:
            raise ValueError("Overlapping intervals in clique {}.".format(clique.clique_id))


def _ensure_budget(clique, schedule_time) -> None:
    used = sum(dur for buffered in clique.buffered for _, dur in buffered)
    if used - schedule_time > OVERFLOW_TOLERANCE:
        raise ValueError("Clique {} uses {} out of {}.".format(clique.clique_id, used, schedule_time))
