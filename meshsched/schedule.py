import math

from meshsched.errors import InfeasibleScheduleError
from meshsched.intervals import (
    first_fit_then_slice,
    get_available_time,
    remove_interval_from_available,
    to_start_stop,
)

# time units (ns) a clique may overflow by because of rounding
OVERFLOW_TOLERANCE = 10


def get_schedule_available_time(bi_duration, bi_overhead_fraction, num_schedule_per_bi):
    '''
    Time available for one repetition of the schedule inside a beacon interval
    '''
    overhead_dur = int(math.ceil(bi_duration * bi_overhead_fraction))
    return int(math.floor((bi_duration - overhead_dur) / num_schedule_per_bi))


def get_seg_duration(schedule_time, share):
    return int(math.floor(schedule_time * share))


def check_clique_budget(topology, schedule_time):
    for clique in topology.budget_cliques():
        durations = [get_seg_duration(schedule_time, s) for s in clique.time_share]
        time_needed = sum(durations)
        if time_needed - schedule_time > OVERFLOW_TOLERANCE:
            # report the segment whose placement first crosses the end of the schedule
            next_sp_start = 0
            for segment, dur in zip(clique.segments, durations):
                next_sp_start += dur
                if next_sp_start > schedule_time:
                    break
            raise InfeasibleScheduleError(clique.clique_id, segment, time_needed - schedule_time)


def get_interference_avoid_times(topology, clique_id, segment):
    '''
    Intervals already buffered for links that interfere with the link of 'segment'.

    The interfering hops are found in interference cliques, then looked up in the classic cliques
    (other than clique_id) that have buffered them.
    '''
    _, n_s, n_d = segment
    time_avoid = []

    for c_itf in topology.interference_cliques():
        seg_in_clq = c_itf.get_seg_indices(n_s, n_d)
        if len(seg_in_clq) == 0:
            continue

        for other_seg, (_, o_s, o_d) in enumerate(c_itf.segments):
            if other_seg in seg_in_clq:
                continue

            for c_classic in topology.real_cliques():
                if c_classic.clique_id == clique_id:
                    continue
                for seg in c_classic.get_seg_indices(o_s, o_d):
                    time_avoid += to_start_stop(c_classic.buffered[seg])

    # remove duplicates, keep the order
    return list(dict.fromkeys(time_avoid))


def schedule_root_clique(clique, schedule_time):
    '''
    Pack segments back to back from time 0
    '''
    next_sp_start = 0
    for i in range(len(clique.segments)):
        seg_dur = get_seg_duration(schedule_time, clique.time_share[i])
        # overflow within the tolerance is rounded away
        dur = min(seg_dur, schedule_time - next_sp_start)
        if dur > 0:
            clique.buffered[i].append((next_sp_start, dur))
        next_sp_start += seg_dur


def schedule_dependent_clique(topology, clique, schedule_time, interference_avoidance):
    master = topology.cliques[clique.master_clique]
    conflict_node = clique.conflict_node

    # the master's service periods with the conflict node cannot be used by this clique
    buf_cfl_sp = []
    for i, (_, n_s, n_d) in enumerate(master.segments):
        if conflict_node in (n_s, n_d):
            buf_cfl_sp += to_start_stop(master.buffered[i])
    time_available_in_clique = get_available_time(buf_cfl_sp, schedule_time)

    for i, segment in enumerate(clique.segments):

        # the hop is already placed by the master clique
        if segment in master.segments:
            clique.buffered[i] = list(master.buffered[master.segments.index(segment)])
            clique.reused[i] = True
            continue

        time_available = time_available_in_clique
        if interference_avoidance:
            time_avoid = get_interference_avoid_times(topology, clique.clique_id, segment)
            time_available = remove_interval_from_available(time_avoid, time_available)

        time_needed = get_seg_duration(schedule_time, clique.time_share[i])
        placed, residual = first_fit_then_slice(time_needed, time_available)

        clique.buffered[i] = placed
        time_available_in_clique = remove_interval_from_available(to_start_stop(placed), time_available_in_clique)

        if residual > OVERFLOW_TOLERANCE:
            raise InfeasibleScheduleError(clique.clique_id, segment, residual)


def configure_schedule(topology, schedule_time, interference_avoidance=False):
    '''
    Place every segment's airtime in [0, schedule_time), clique by clique in scheduling order.
    - Make changes to cliques' 'buffered', 'reused'

    @output buffered, dict segment -> list of (start, duration), from the first clique buffering it
    '''
    for clique in topology.cliques + topology.standalone:
        clique.clear_buffer()

    check_clique_budget(topology, schedule_time)

    for c in topology.scheduling_order:
        clique = topology.cliques[c]
        if clique.master_clique is None:
            schedule_root_clique(clique, schedule_time)
        else:
            schedule_dependent_clique(topology, clique, schedule_time, interference_avoidance)

    for clique in topology.standalone:
        schedule_root_clique(clique, schedule_time)

    print("===========Finish configuring the schedule of {} ns============".format(schedule_time))

    return get_segment_schedule(topology)


def get_segment_schedule(topology):
    buffered = {}
    for c in topology.scheduling_order:
        clique = topology.cliques[c]
        for i, segment in enumerate(clique.segments):
            if segment not in buffered:
                buffered[segment] = list(clique.buffered[i])
    for clique in topology.standalone:
        buffered[clique.segments[0]] = list(clique.buffered[0])

    return buffered
