class MeshScheduleError(Exception):
    pass


class MalformedTopologyError(MeshScheduleError):
    '''
    The flow paths cannot be turned into a clique hierarchy rooted at the gateway
    '''
    pass


class InfeasibleScheduleError(MeshScheduleError):
    '''
    A clique needs more airtime than its budget holds (beyond the rounding tolerance)
    '''
    def __init__(self, clique_id, segment, shortfall) -> None:
        self.clique_id = clique_id
        self.segment = segment
        self.shortfall = shortfall
        super().__init__("Time in clique {} overflowing by {} for segment {}".format(clique_id, shortfall, segment))


class FillingDivergenceError(MeshScheduleError):
    pass
