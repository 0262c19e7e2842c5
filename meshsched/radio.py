'''
Radio models feeding link capacities and interference to the scheduler.

Any object with these two methods can be used:
    get_capacity(from_node, to_node) -> bit-rate of the hop
    gets_interfere(victim, partner, tx, rx) -> True if 'victim', beamformed towards 'partner',
        hears the transmission tx -> rx
'''
import math
from typing import Dict, Iterable, Tuple

import numpy as np

# received power at or below this level (dBm) is not detectable
INTERFERENCE_FLOOR_DBM = -1.0e6


class RadioModel:
    def get_capacity(self, from_node, to_node) -> float:
        raise NotImplementedError

    def gets_interfere(self, victim, partner, tx, rx) -> bool:
        raise NotImplementedError


class StaticRadioModel(RadioModel):
    '''
    Table driven model.

    @input capacity, a bit-rate for every link, or a dict keyed by (node_a, node_b) in any order
    @input interfering, (victim, partner, tx, rx) tuples that interfere
    @input default_capacity, used for links missing from the dict
    '''
    def __init__(self, capacity, interfering: Iterable[Tuple[int, int, int, int]] = (), default_capacity=None) -> None:
        if isinstance(capacity, dict):
            self.capacity: Dict[Tuple[int, int], float] = {
                (max(a, b), min(a, b)): capa for (a, b), capa in capacity.items()}
            self.default_capacity = default_capacity
        else:
            self.capacity = {}
            self.default_capacity = capacity
        self.interfering = set(tuple(s) for s in interfering)

    def get_capacity(self, from_node, to_node) -> float:
        link = (max(from_node, to_node), min(from_node, to_node))
        if link in self.capacity:
            return self.capacity[link]
        if self.default_capacity is None:
            raise KeyError("No capacity known for link {}".format(link))
        return self.default_capacity

    def gets_interfere(self, victim, partner, tx, rx) -> bool:
        return (victim, partner, tx, rx) in self.interfering


class ProtocolRadioModel(StaticRadioModel):
    '''
    Protocol model on node positions: the transmission tx -> rx reaches 'victim'
    when the victim is closer than interf_dist_thre to tx and inside the main lobe of the tx -> rx beam.

    @input positions, (x, y) of every node, indexed by node id
    @input angle_thre, 1/2 main lobe width based on beamforming ability, in radians [0, pi]
    '''
    def __init__(self, positions, capacity, interf_dist_thre, angle_thre, default_capacity=None) -> None:
        super().__init__(capacity, default_capacity=default_capacity)
        self.positions = positions
        self.interf_dist_thre = interf_dist_thre
        self.angle_thre = angle_thre

    def get_distance(self, a, b) -> float:
        pos_a = np.asarray(self.positions[a], dtype=float)
        pos_b = np.asarray(self.positions[b], dtype=float)
        return float(np.sqrt(np.sum(pow(pos_a - pos_b, 2))))

    def get_interference_power(self, victim, partner, tx, rx) -> float:
        '''
        Relative received power (dB) at the victim from tx, free-space decay only.
        INTERFERENCE_FLOOR_DBM when the victim is out of range or outside the main lobe.
        '''
        d_tv = self.get_distance(tx, victim)
        if d_tv >= self.interf_dist_thre:
            return INTERFERENCE_FLOOR_DBM

        # compute the deviation angle between tx -> rx and tx -> victim
        d_tr = self.get_distance(tx, rx)
        d_rv = self.get_distance(rx, victim)
        if d_tv == 0 or d_tr == 0:
            raise ValueError("Nodes {} and {} share a position with {}".format(victim, rx, tx))

        cos_theta = (pow(d_tv, 2) + pow(d_tr, 2) - pow(d_rv, 2)) / (2 * d_tv * d_tr)
        theta = np.arccos(np.clip(cos_theta, -1.0, 1.0)) # radian in [0,pi]

        if theta >= self.angle_thre:
            return INTERFERENCE_FLOOR_DBM

        return -20 * math.log10(d_tv)

    def gets_interfere(self, victim, partner, tx, rx) -> bool:
        return self.get_interference_power(victim, partner, tx, rx) > INTERFERENCE_FLOOR_DBM
