from typing import Dict, List, Optional, Tuple

# (flow_id, from_node, to_node)
Segment = Tuple[int, int, int]


# define the class of a contention domain
class Clique:
    def __init__(self, clique_id, members, conflict_node=None, is_interference=False) -> None:
        self.clique_id = clique_id
        self.members = list(members) # for a classic clique the conflict node is the last member
        self.conflict_node = conflict_node
        self.is_interference = is_interference
        self.segments = [] # a list of (flow_id, from_node, to_node)
        self.capacity = []
        self.time_share = []
        self.buffered = [] # per segment, a list of (start, duration)
        self.reused = [] # per segment, True if copied from the master clique
        self.master = None
        self.master_clique = None

    def add_segment(self, segment: Segment) -> None:
        self.segments.append(segment)
        self.capacity.append(0)
        self.time_share.append(0)
        self.buffered.append([])
        self.reused.append(False)

    def clear_buffer(self) -> None:
        self.buffered = [[] for _ in self.segments]
        self.reused = [False for _ in self.segments]

    def get_seg_indices(self, from_node, to_node) -> List[int]:
        '''
        Indices of the segments running over link from_node <-> to_node, in either direction and for any flow
        '''
        return [i for i, (_, n_s, n_d) in enumerate(self.segments)
                if (n_s == from_node and n_d == to_node) or (n_s == to_node and n_d == from_node)]

    def total_share(self) -> float:
        return sum(self.time_share)

    def __repr__(self) -> str:
        return "Clique({}, members={}, conflict_node={})".format(self.clique_id, self.members, self.conflict_node)


class Topology:
    def __init__(self, flows_path, gateway) -> None:
        self.flows_path = [list(path) for path in flows_path]
        self.gateway = gateway
        self.link_list = [] # canonical (max, min) pairs, sorted
        self.neigh_nodes: Dict[int, List[int]] = {}
        self.cliques: List[Clique] = []
        self.standalone: List[Clique] = [] # single links without any conflict node
        self.interference_start = 0
        self.scheduling_order: List[int] = []
        self.hierarchy: List[List[int]] = [] # BFS levels of conflict nodes
        self.master: Dict[int, Optional[int]] = {}

    @property
    def num_flow(self) -> int:
        return len(self.flows_path)

    def get_conflict_nodes(self) -> List[int]:
        return [self.cliques[c].conflict_node for c in range(self.interference_start)]

    def get_clique_id(self, node) -> Optional[int]:
        for c in range(self.interference_start):
            if self.cliques[c].conflict_node == node:
                return c
        return None

    def real_cliques(self) -> List[Clique]:
        return self.cliques[:self.interference_start]

    def interference_cliques(self) -> List[Clique]:
        return self.cliques[self.interference_start:]

    def budget_cliques(self) -> List[Clique]:
        '''
        Every group of segments that owns an independent time budget
        '''
        return self.real_cliques() + self.standalone


class ServicePeriod:
    def __init__(self, start, stop, peer, flow_id, src, sink, is_tx) -> None:
        self.start = start
        self.stop = stop
        self.peer = peer
        self.flow_id = flow_id
        self.src = src
        self.sink = sink
        self.is_tx = is_tx

    @property
    def duration(self):
        return self.stop - self.start

    def __eq__(self, other) -> bool:
        if not isinstance(other, ServicePeriod):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        return "ServicePeriod({} -> {}, peer={}, flow={}, tx={})".format(self.start, self.stop, self.peer, self.flow_id, self.is_tx)
