from meshsched import bottleneck as bo, hierarchy as hi, interference as itf, schedule as sc, service_period as sp
from meshsched.topology import build_topology


class ScheduleController:
    '''
    Central scheduler of the mesh.

    Topology, cliques and hierarchy are built once per flow set (configure_cliques, configure_hierarchy);
    the rate allocation and the schedule can be recomputed for new demands or capacities (run).
    '''
    def __init__(self, para_config, radio) -> None:
        self.para_config = para_config
        self.radio = radio
        self.topology = None
        self.flows_rate = None
        self.schedule_time = sc.get_schedule_available_time(para_config.bi_duration,
                                                            para_config.bi_overhead_fraction,
                                                            para_config.num_schedule_per_bi)

    def configure_cliques(self, flows_path):
        self.topology = build_topology(flows_path, self.para_config.gateway)
        if self.para_config.sim_interference:
            itf.configure_interference(self.topology, self.radio.gets_interfere)
        return self.topology.cliques

    def configure_hierarchy(self):
        self._require_topology()
        return hi.configure_hierarchy(self.topology)

    def progressive_filling(self, flows_dmd):
        self._require_topology()
        bo.configure_capacity(self.topology, self.radio.get_capacity)
        self.flows_rate = bo.progressive_filling(self.topology, flows_dmd, self.para_config.fill_step)
        return self.flows_rate

    def assign_equal_air_time(self):
        self._require_topology()
        return bo.assign_equal_air_time(self.topology)

    def flow_rate_max_dlmac(self):
        self._require_topology()
        return bo.flow_rate_max_dlmac(self.topology, self.radio.get_capacity,
                                      self.para_config.payload_bytes,
                                      self.para_config.bi_overhead_fraction)

    def configure_schedule(self):
        self._require_topology()
        if len(self.topology.hierarchy) == 0:
            raise RuntimeError("Configure the hierarchy before scheduling")
        return sc.configure_schedule(self.topology, self.schedule_time,
                                     interference_avoidance=self.para_config.sim_interference)

    def get_service_periods(self):
        self._require_topology()
        return sp.get_service_periods(self.topology,
                                      self.para_config.bi_duration,
                                      self.para_config.bi_overhead_fraction,
                                      self.para_config.num_schedule_per_bi,
                                      self.para_config.ack_time_frac)

    def run(self, flows_dmd):
        '''
        Rates, schedule and service periods for the current topology
        '''
        self.progressive_filling(flows_dmd)
        buffered = self.configure_schedule()
        return self.flows_rate, buffered, self.get_service_periods()

    def _require_topology(self):
        if self.topology is None:
            raise RuntimeError("Configure the cliques before scheduling")
