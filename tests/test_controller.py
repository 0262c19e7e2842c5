from __future__ import annotations

import pytest

from config import ParaConfig
from meshsched.controller import ScheduleController
from meshsched.radio import StaticRadioModel


def _controller(**kwargs) -> ScheduleController:
    para_config = ParaConfig(bi_duration=1000, fill_step=1, **kwargs)
    return ScheduleController(para_config, StaticRadioModel(100, [(4, 3, 2, 1)]))


def test_schedule_time_from_beacon_interval() -> None:
    assert _controller().schedule_time == 1000
    assert _controller(bi_overhead_fraction=0.5, num_schedule_per_bi=2).schedule_time == 250


def test_full_run_on_a_chain() -> None:
    controller = _controller()
    controller.configure_cliques([[0, 1, 2, 3]])
    assert controller.configure_hierarchy() == [0, 1]

    flows_rate, buffered, station_sps = controller.run([30])

    assert flows_rate.tolist() == [30]
    assert buffered == {(0, 0, 1): [(0, 300)], (0, 1, 2): [(300, 300)], (0, 2, 3): [(0, 300)]}
    assert sorted(station_sps) == [0, 1, 2, 3]


def test_run_can_be_repeated_with_new_demands() -> None:
    controller = _controller()
    controller.configure_cliques([[0, 1, 2, 3]])
    controller.configure_hierarchy()
    controller.run([30])

    flows_rate, buffered, _ = controller.run([100])

    assert flows_rate.tolist() == [50]
    assert buffered[(0, 2, 3)] == [(0, 500)]


def test_interference_cliques_follow_the_config() -> None:
    controller = _controller(sim_interference=True)
    cliques = controller.configure_cliques([[4, 3, 2, 1, 0]])
    controller.configure_hierarchy()
    _, buffered, _ = controller.run([20])

    assert len(cliques) == 4
    assert buffered[(0, 4, 3)] == [(400, 200)]


def test_scheduling_needs_topology_and_hierarchy() -> None:
    controller = _controller()
    with pytest.raises(RuntimeError):
        controller.run([10])

    controller.configure_cliques([[0, 1, 2]])
    with pytest.raises(RuntimeError):
        controller.run([10])


def test_equal_air_time_and_dlmac_estimate() -> None:
    controller = _controller()
    controller.configure_cliques([[0, 1, 2]])

    sp_alloc = controller.assign_equal_air_time()
    assert sp_alloc[1, 0] == pytest.approx(0.5)
    assert sp_alloc[2, 1] == pytest.approx(0.5)

    rates = controller.flow_rate_max_dlmac()
    # 24000 bytes at 100 bit/s take 1920 s; the relay 1 receives and forwards
    assert rates[0] == pytest.approx(192000 / (2 * (1.92e12 + 9450)) * 1e9)
