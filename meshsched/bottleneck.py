import math

import numpy as np

from meshsched.errors import FillingDivergenceError

# new rates are quantized to 4 decimals
RATE_QUANTUM = 10000.0
# per payload: preamble, header and block ack (ns)
PAYLOAD_OVERHEAD_NS = 6450 + 3000


def configure_capacity(topology, get_capacity):
    '''
    Make changes to cliques' 'capacity' (classic, interference and stand-alone links)

    @input get_capacity, callable (from_node, to_node) -> bit-rate of the hop
    '''
    for clique in topology.cliques + topology.standalone:
        for i, (_, n_s, n_d) in enumerate(clique.segments):
            capa = get_capacity(n_s, n_d)
            if not capa > 0:
                raise ValueError("Link {} -> {} has a non-positive capacity {}".format(n_s, n_d, capa))
            clique.capacity[i] = capa

    return topology


def update_time_share(clique, flows_rate):
    '''
    time share on each segment = rate of its flow / capacity of the hop
    '''
    flow_ids = [f for f, _, _ in clique.segments]
    shares = flows_rate[flow_ids] / np.asarray(clique.capacity, dtype=float)
    clique.time_share = shares.tolist()
    return shares


def progressive_filling(topology, flows_dmd, fill_step, max_iteration=None):
    '''
    Max-min fair rate allocation over clique time budgets.
    - Make changes to cliques' 'time_share'

    Every active flow grows by fill_step per iteration. When a clique's airtime is used up,
    the time left by its frozen flows is shared out equally (in rate) among its active flows,
    which are frozen as well. Flows that met their demand in the same step are capped at that rate.

    @input flows_dmd, (num_flow,) demand of each flow
    @output flows_rate, (num_flow,)
    '''
    flows_dmd = np.asarray(flows_dmd, dtype=float)
    num_flow = topology.num_flow

    if flows_dmd.shape != (num_flow,):
        raise ValueError("Expected {} flow demands, got {}".format(num_flow, flows_dmd.shape))
    if np.any(flows_dmd < 0) or not np.all(np.isfinite(flows_dmd)):
        raise ValueError("Flow demands must be finite and non-negative")
    if not fill_step > 0:
        raise ValueError("The filling step must be positive")

    if max_iteration is None:
        # rates only grow, so every flow meets its demand after ceil(max / step) steps
        max_iteration = int(math.ceil(flows_dmd.max() / fill_step)) + 2

    if_active = np.ones(num_flow, dtype=bool)
    flows_rate = np.zeros(num_flow)
    budgets = topology.budget_cliques()

    iteration = 0
    while if_active.any():

        iteration += 1
        if iteration > max_iteration:
            raise FillingDivergenceError("Progressive filling did not converge in {} iterations".format(max_iteration))

        # for each active flow, increase the rate and check if demand is met
        flows_rate[if_active] += fill_step
        satisfied = if_active & (flows_rate >= flows_dmd)
        flows_rate[satisfied] = flows_dmd[satisfied]
        if_active[satisfied] = False

        for clique in budgets:
            if len(clique.segments) == 0:
                continue
            shares = update_time_share(clique, flows_rate)

            # check if time is used up
            if shares.sum() >= 1.0:
                flow_ids = np.array([f for f, _, _ in clique.segments])
                seg_active = if_active[flow_ids]
                # flows that met their demand in this step may still overbook the clique
                seg_met = satisfied[flow_ids]
                seg_fill = seg_active | seg_met
                if not seg_fill.any():
                    continue

                # time left by flows frozen earlier, then new rate = time left / sum(1/capacity)
                time_left = 1.0 - shares[~seg_fill].sum()
                inv_sum = (1.0 / np.asarray(clique.capacity, dtype=float)[seg_fill]).sum()
                new_rate = max(0.0, math.floor(time_left / inv_sum * RATE_QUANTUM) / RATE_QUANTUM)

                flows_rate[flow_ids[seg_active]] = new_rate
                if_active[flow_ids[seg_active]] = False
                met_ids = flow_ids[seg_met]
                flows_rate[met_ids] = np.minimum(flows_rate[met_ids], new_rate)
                update_time_share(clique, flows_rate)

    # double check time
    for clique in topology.cliques + topology.standalone:
        if len(clique.segments) > 0:
            update_time_share(clique, flows_rate)

    print("===========Finish progressive filling in {} iterations============".format(iteration))

    return flows_rate


def get_clique_time_usage(topology):
    '''
    @output time_usage, (num_clique,) time used in each clique (interference cliques included)
    '''
    return np.array([clique.total_share() for clique in topology.cliques])


def assign_equal_air_time(topology):
    '''
    Every member of a clique gets the same air-time with the conflict node,
    each clique having an equal part of the beacon interval.

    @output sp_alloc, (num_node, num_node) symmetric fraction of air-time for each pair of stations
    '''
    num_node = max(topology.neigh_nodes) + 1
    sp_alloc = np.zeros([num_node, num_node])
    real_cliques = topology.real_cliques()

    for clique in real_cliques:
        # the last member of each clique is the conflict node
        conflict_node = clique.members[-1]
        sp_for_this_clique = 1.0 / len(real_cliques) / (len(clique.members) - 1)
        for n in clique.members[:-1]:
            sp_alloc[conflict_node, n] = sp_for_this_clique
            sp_alloc[n, conflict_node] = sp_for_this_clique

    return sp_alloc


def flow_rate_max_dlmac(topology, get_capacity, payload_bytes=24000, bi_overhead_fraction=0):
    '''
    Rate estimate when every station serves its hops one payload at a time.
    A relay spends time on receiving and forwarding, the source only sends, the sink only receives;
    a flow gets the rate of its busiest station.

    @output flows_rate, (num_flow,) bit/s
    '''
    num_node = max(topology.neigh_nodes) + 1
    sta_schedule_len = np.zeros(num_node) # ns
    payload_bits = payload_bytes * 8

    for path in topology.flows_path:
        for i in range(len(path) - 1):
            sta, nxt = path[i], path[i + 1]
            if i != 0:
                sta_schedule_len[sta] += np.ceil(payload_bits * 1e9 / get_capacity(path[i - 1], sta)) + PAYLOAD_OVERHEAD_NS

            tx_time = np.ceil(payload_bits * 1e9 / get_capacity(sta, nxt)) + PAYLOAD_OVERHEAD_NS
            sta_schedule_len[sta] += tx_time
            if i == len(path) - 2:
                sta_schedule_len[nxt] += tx_time

    flows_rate = np.zeros(topology.num_flow)
    for f, path in enumerate(topology.flows_path):
        # equivalent rate at each node
        rate_at_node = payload_bits / sta_schedule_len[path] * 1e9
        flows_rate[f] = rate_at_node.min() * (1.0 - bi_overhead_fraction)

    return flows_rate
