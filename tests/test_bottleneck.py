from __future__ import annotations

import numpy as np
import pytest

from meshsched.bottleneck import (
    assign_equal_air_time,
    configure_capacity,
    flow_rate_max_dlmac,
    get_clique_time_usage,
    progressive_filling,
)
from meshsched.errors import FillingDivergenceError
from meshsched.radio import StaticRadioModel
from meshsched.topology import build_topology


def _build(flows_path, capacity):
    topology = build_topology(flows_path, gateway=0)
    configure_capacity(topology, StaticRadioModel(capacity).get_capacity)
    return topology


def test_capacities_follow_the_hops() -> None:
    topology = _build([[0, 1, 2]], {(0, 1): 100, (2, 1): 50})
    assert topology.cliques[0].capacity == [100, 50]


def test_non_positive_capacity_is_rejected() -> None:
    topology = build_topology([[0, 1, 2]], gateway=0)
    with pytest.raises(ValueError):
        configure_capacity(topology, StaticRadioModel(0).get_capacity)


def test_demand_below_fair_share_is_met() -> None:
    topology = _build([[0, 1, 2]], {(0, 1): 100, (2, 1): 50})
    rates = progressive_filling(topology, [20], fill_step=1)

    assert rates.tolist() == [20]
    assert topology.cliques[0].time_share == pytest.approx([0.2, 0.4])


def test_saturated_clique_shares_time_left() -> None:
    topology = _build([[0, 1, 2]], {(0, 1): 100, (2, 1): 50})
    rates = progressive_filling(topology, [200], fill_step=1)

    # 1 / (1/100 + 1/50), quantized to 4 decimals
    assert rates[0] == pytest.approx(33.3333)
    assert topology.cliques[0].time_share == pytest.approx([0.333333, 0.666666])
    assert topology.cliques[0].total_share() <= 1.0


def test_flows_sharing_a_clique_get_equal_rates() -> None:
    topology = _build([[0, 1], [0, 1, 2]], 100)
    rates = progressive_filling(topology, [1000, 1000], fill_step=1)

    # three segments of capacity 100 in the clique of node 1
    assert rates == pytest.approx([33.3333, 33.3333])


def test_small_flow_leaves_time_to_the_other() -> None:
    topology = _build([[0, 1], [0, 1, 2]], 100)
    rates = progressive_filling(topology, [10, 100], fill_step=1)

    assert rates[0] == 10
    assert rates[1] == pytest.approx(45.0, abs=1e-3)
    assert topology.cliques[0].total_share() == pytest.approx(1.0, abs=1e-4)


def test_max_min_fairness_per_clique() -> None:
    topology = _build([[0, 1, 2, 3], [0, 1, 4], [3, 2, 5]], 100)
    rates = progressive_filling(topology, [1000, 1000, 1000], fill_step=1)

    # every flow is frozen in a saturated clique where it has the largest rate
    for f in range(topology.num_flow):
        saturated = [c for c in topology.budget_cliques()
                     if f in [s[0] for s in c.segments] and c.total_share() >= 1.0 - 1e-3]
        assert saturated
        assert any(rates[f] >= max(rates[[s[0] for s in c.segments]]) - 1e-3 for c in saturated)


def test_standalone_link_bounds_the_rate() -> None:
    topology = _build([[0, 1]], 100)
    rates = progressive_filling(topology, [1000], fill_step=1)

    assert rates[0] == pytest.approx(100.0)
    assert topology.standalone[0].time_share == pytest.approx([1.0])


def test_clique_time_usage() -> None:
    topology = _build([[0, 1, 2, 3]], 100)
    progressive_filling(topology, [30], fill_step=1)

    assert get_clique_time_usage(topology) == pytest.approx(np.array([0.6, 0.6]))


@pytest.mark.parametrize(
    "flows_dmd, fill_step",
    [
        ([10, 10], 1),
        ([-1], 1),
        ([np.inf], 1),
        ([10], 0),
    ],
)
def test_invalid_filling_input(flows_dmd, fill_step) -> None:
    topology = _build([[0, 1, 2]], 100)
    with pytest.raises(ValueError):
        progressive_filling(topology, flows_dmd, fill_step)


def test_iteration_bound() -> None:
    topology = _build([[0, 1, 2]], 100)
    with pytest.raises(FillingDivergenceError):
        progressive_filling(topology, [100], fill_step=1, max_iteration=3)


def test_flow_meeting_demand_in_saturating_step_is_capped() -> None:
    # 50.5 on both hops needs 1.002 of the clique, 50.4 fits
    topology = _build([[0, 1, 2]], 100.8)
    rates = progressive_filling(topology, [50.5], fill_step=1)

    assert rates[0] == pytest.approx(50.4, abs=1e-3)
    assert rates[0] <= 50.4
    assert topology.cliques[0].total_share() <= 1.0


def test_capped_flow_keeps_its_demand_when_it_fits() -> None:
    topology = _build([[0, 1, 2]], 100)
    rates = progressive_filling(topology, [50], fill_step=1)

    assert rates.tolist() == [50]


def test_equal_air_time_per_clique_member() -> None:
    topology = build_topology([[0, 1, 2, 3], [0, 1, 4]], gateway=0)
    sp_alloc = assign_equal_air_time(topology)

    assert sp_alloc.shape == (5, 5)
    # clique of node 1 has members 0, 2, 4; clique of node 2 has 1, 3
    assert sp_alloc[1, 0] == pytest.approx(1 / 2 / 3)
    assert sp_alloc[1, 4] == pytest.approx(1 / 2 / 3)
    assert sp_alloc[2, 3] == pytest.approx(1 / 2 / 2)
    assert sp_alloc[3, 2] == sp_alloc[2, 3]
    assert sp_alloc[0, 4] == 0
    assert np.allclose(sp_alloc, sp_alloc.T)


def test_dlmac_rate_follows_the_busiest_station() -> None:
    topology = build_topology([[0, 1, 2]], gateway=0)
    rates = flow_rate_max_dlmac(topology, StaticRadioModel(1e9).get_capacity)

    # 24000 bytes take 192000 ns at 1 Gbps plus 9450 ns overhead; the relay 1 receives and forwards
    assert rates[0] == pytest.approx(192000 / (2 * 201450) * 1e9)


def test_dlmac_rate_accounts_for_overhead() -> None:
    topology = build_topology([[0, 1], [2, 1, 0]], gateway=0)
    rates = flow_rate_max_dlmac(topology, StaticRadioModel(1e9).get_capacity, bi_overhead_fraction=0.5)

    # node 1 receives for flow 0, then receives and forwards for flow 1
    assert rates[0] == pytest.approx(192000 / (3 * 201450) * 1e9 * 0.5)
    assert rates[1] == pytest.approx(rates[0])
