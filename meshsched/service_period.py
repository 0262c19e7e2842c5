import math

from meshsched import element
from meshsched.schedule import get_schedule_available_time


def add_service_period(station_sps, sta, start, dur, peer, flow_path, flow_id, is_tx, ack_time_frac):
    '''
    One buffered interval becomes one SP, or a data SP followed by a reverse ack SP
    '''
    src, sink = flow_path[0], flow_path[-1]
    stop = start + dur
    sps = station_sps.setdefault(sta, [])

    if ack_time_frac != 0:
        sub_sp_end = start + int(math.floor(dur * (1 - ack_time_frac)))
        sps.append(element.ServicePeriod(start, sub_sp_end, peer, flow_id, src, sink, is_tx))
        # ack packets go from the flow sink back to the flow source
        sps.append(element.ServicePeriod(sub_sp_end, stop, peer, flow_id, sink, src, not is_tx))
    else:
        sps.append(element.ServicePeriod(start, stop, peer, flow_id, src, sink, is_tx))


def get_service_periods(topology, bi_duration, bi_overhead_fraction, num_schedule_per_bi, ack_time_frac=0):
    '''
    Install the schedule num_schedule_per_bi times in a beacon interval, after the overhead.
    - a conflict node gets the SPs of every segment of its clique it takes part in, towards the other end
    - another member gets the SPs of its own segments, towards the conflict node
    - a member that is the conflict node of another clique is skipped (it installs from its own clique)
    - both ends of a stand-alone link get its SPs

    @output station_sps, dict node_id -> list of ServicePeriod sorted by start
    '''
    if not 0 <= ack_time_frac < 1:
        raise ValueError("The ack time fraction must be in [0, 1)")

    overhead_dur = int(math.ceil(bi_duration * bi_overhead_fraction))
    schedule_dur = get_schedule_available_time(bi_duration, bi_overhead_fraction, num_schedule_per_bi)
    conflict_nodes = topology.get_conflict_nodes()

    station_sps = {}
    schedule_start = overhead_dur
    for _ in range(num_schedule_per_bi):

        for clique in topology.real_cliques():
            conflict_node = clique.conflict_node

            for sta in clique.members:
                if sta != conflict_node and sta in conflict_nodes:
                    continue

                for i, (f, n_s, n_d) in enumerate(clique.segments):
                    if sta not in (n_s, n_d):
                        # hops between two other members are installed from the cliques of their ends
                        continue
                    if sta == conflict_node:
                        peer = n_d if sta == n_s else n_s
                    else:
                        peer = conflict_node

                    for start, dur in clique.buffered[i]:
                        add_service_period(station_sps, sta, schedule_start + start, dur, peer,
                                           topology.flows_path[f], f, sta == n_s, ack_time_frac)

        for link_clique in topology.standalone:
            f, n_s, n_d = link_clique.segments[0]
            for start, dur in link_clique.buffered[0]:
                add_service_period(station_sps, n_s, schedule_start + start, dur, n_d,
                                   topology.flows_path[f], f, True, ack_time_frac)
                add_service_period(station_sps, n_d, schedule_start + start, dur, n_s,
                                   topology.flows_path[f], f, False, ack_time_frac)

        schedule_start += schedule_dur

    for sta in station_sps:
        station_sps[sta].sort(key=lambda sp: sp.start)

    print("===========Finish installing service periods on {} stations============".format(len(station_sps)))

    return station_sps
