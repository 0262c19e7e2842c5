from __future__ import annotations

import math

import pytest

from meshsched.radio import INTERFERENCE_FLOOR_DBM, ProtocolRadioModel, StaticRadioModel


def test_static_capacity_is_direction_independent() -> None:
    radio = StaticRadioModel({(0, 1): 100, (2, 1): 50})

    assert radio.get_capacity(1, 0) == 100
    assert radio.get_capacity(1, 2) == 50
    with pytest.raises(KeyError):
        radio.get_capacity(2, 3)


def test_static_default_capacity() -> None:
    radio = StaticRadioModel({(0, 1): 100}, default_capacity=10)
    assert radio.get_capacity(5, 6) == 10
    assert StaticRadioModel(7).get_capacity(3, 4) == 7


def test_static_interference_is_ordered() -> None:
    radio = StaticRadioModel(100, [(4, 3, 2, 1)])

    assert radio.gets_interfere(4, 3, 2, 1)
    assert not radio.gets_interfere(3, 4, 2, 1)
    assert not radio.gets_interfere(4, 3, 1, 2)


def _protocol_radio() -> ProtocolRadioModel:
    positions = {0: (0, 0), 1: (100, 0), 2: (50, 5), 3: (0, 100), 4: (300, 0)}
    return ProtocolRadioModel(positions, 1e9, interf_dist_thre=150, angle_thre=math.pi / 12)


def test_victim_in_main_lobe_is_interfered() -> None:
    radio = _protocol_radio()

    assert radio.gets_interfere(2, 3, 0, 1)
    assert radio.get_interference_power(2, 3, 0, 1) > INTERFERENCE_FLOOR_DBM


def test_victim_outside_main_lobe() -> None:
    radio = _protocol_radio()
    assert not radio.gets_interfere(3, 2, 0, 1)


def test_victim_out_of_range() -> None:
    radio = _protocol_radio()
    assert radio.get_interference_power(4, 2, 0, 1) == INTERFERENCE_FLOOR_DBM
    assert not radio.gets_interfere(4, 2, 0, 1)


def test_protocol_capacity() -> None:
    assert _protocol_radio().get_capacity(0, 1) == 1e9
