import numpy as np

from meshsched import bottleneck as bo, figure, radio, validate
from meshsched.controller import ScheduleController
import argparse
import config
import scipy.io




def sched_method(para_config, args, flows_path, positions, flows_dmd):

    # ---------------------------------------------------------------------------- #
    #                         parameters and initilization                         #
    # ---------------------------------------------------------------------------- #
    drawFigure = args.drawFigure

    interf_dist_thre = para_config.interf_dist_thre
    angle_thre = para_config.angle_thre
    link_capacity = para_config.link_capacity

    radio_model = radio.ProtocolRadioModel(positions, link_capacity, interf_dist_thre, angle_thre)
    controller = ScheduleController(para_config, radio_model)


    # ---------------------------------------------------------------------------- #
    #                        cliques and scheduling hierarchy                      #
    # ---------------------------------------------------------------------------- #
    cliques = controller.configure_cliques(flows_path)
    for clique in cliques:
        print("{} : {}".format(clique, clique.segments))

    scheduling_order = controller.configure_hierarchy()
    print("The scheduling order is {}".format(scheduling_order))


    # ---------------------------------------------------------------------------- #
    #                      fair rates, schedule, service periods                   #
    # ---------------------------------------------------------------------------- #
    flows_rate, buffered, station_sps = controller.run(flows_dmd)
    validate.validate_schedule(controller.topology, controller.schedule_time)

    print("The fair flow rates are {}".format(flows_rate))
    print("The current throughput is {:.3f} Gbps".format(sum(flows_rate)/1e9))
    print("The time usage in cliques is {}".format(bo.get_clique_time_usage(controller.topology)))

    for sta in sorted(station_sps):
        print("STA {} has {} SPs: {}".format(sta, len(station_sps[sta]), station_sps[sta]))

    if drawFigure:
        figure.draw_schedule(controller.topology, controller.schedule_time, args.figure_file)

    # one row per segment: clique, flow, from, to, time share
    time_share = [[c, *seg, clique.time_share[i]]
                  for c, clique in enumerate(controller.topology.cliques)
                  for i, seg in enumerate(clique.segments)]
    # one row per interval: flow, from, to, start, duration
    intervals = [[*seg, start, dur] for seg, buf in buffered.items() for start, dur in buf]

    return flows_rate, time_share, intervals



def parse_args():
    # fmt: off
    parser = argparse.ArgumentParser()
    parser.add_argument("--drawFigure", type = int, default = 1, help = "")
    parser.add_argument("--figure_file", type = str, default = "schedule.png", help = "")
    parser.add_argument("--sim_interference", type = int, default = 0, help = "")
    parser.add_argument("--gateway", type = int, default = 0, help = "")
    parser.add_argument("--demand", type = float, default = 5e8, help = "demand of every flow (bit/s)")
    parser.add_argument("--num_schedule_per_bi", type = int, default = 1, help = "")
    parser.add_argument("--ack_time_frac", type = float, default = 0, help = "")

    args = parser.parse_args()
    return args


if __name__ == '__main__':
    args = parse_args()
    para_config = config.ParaConfig()

    para_config.gateway = args.gateway
    para_config.sim_interference = bool(args.sim_interference)
    para_config.num_schedule_per_bi = args.num_schedule_per_bi
    para_config.ack_time_frac = args.ack_time_frac

    # a small mesh: a 5-hop chain out of the gateway and a branch at node 2
    positions = {0: (0, 0), 1: (100, 0), 2: (200, 0), 3: (300, 0), 4: (400, 0), 5: (200, 100), 6: (200, 200)}
    flows_path = [[0, 1, 2, 3, 4],
                  [0, 1, 2, 5, 6],
                  [4, 3, 2, 1, 0]]
    flows_dmd = np.full(len(flows_path), args.demand)

    flows_rate, time_share, intervals = sched_method(para_config, args, flows_path, positions, flows_dmd)


    scipy.io.savemat('sched_result.mat', {"flows_path": np.array(flows_path),
                                          "flows_rate": flows_rate,
                                          "time_share": np.array(time_share, dtype=float),
                                          "intervals": np.array(intervals, dtype=float)})
