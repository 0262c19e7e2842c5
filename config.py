import math


class ParaConfig():
    '''
    This is the parameter configuration class for the mesh scheduler
    The initialization parameters need to be modified according to the specific requirements of the deployment
    '''
    def __init__(self,
        bi_duration = 102400000,    # beacon interval (ns)
        bi_overhead_fraction = 0,   # fraction of the beacon interval kept for beacons and beamforming training
        num_schedule_per_bi = 1,    # the schedule is repeated this many times in a beacon interval
        fill_step = 1e6,    # rate increment of progressive filling (bit/s)
        gateway = 0,
        sim_interference = False,   # add interference cliques and avoid interfering intervals
        ack_time_frac = 0,      # fraction of each SP given back to the reverse ack traffic
        comm_dist_thre = 150,   # transmission distance (m) based on channels
        angle_thre = math.pi/12,    # interference angle (pi) based on beamwidth
        link_capacity = 1e9,    # default capacity of a link (bit/s)
        payload_bytes = 24000,  # payload size used by the per-station rate estimate
    ):
        # ------------------------------ Beacon interval set-up ------------------------------ #
        self.bi_duration = bi_duration
        self.bi_overhead_fraction = bi_overhead_fraction
        self.num_schedule_per_bi = num_schedule_per_bi
        self.ack_time_frac = ack_time_frac
        self.payload_bytes = payload_bytes

        # ------------------------------ Scheduler set-up ------------------------------ #
        self.fill_step = fill_step
        self.gateway = gateway
        self.sim_interference = sim_interference

        # ------------------------------ Radio set-up ------------------------------ #
        self.comm_dist_thre = comm_dist_thre
        self.angle_thre = angle_thre
        self.interf_dist_thre = comm_dist_thre
        self.link_capacity = link_capacity
