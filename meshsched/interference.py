from meshsched import element


def get_interference_sets(topology, gets_interfere):
    '''
    Find which links should not be active at the same time.

    For every station, every link it transmits on and every other link sharing no station with it,
    ask the radio model whether one end of the other link hears the transmission while receiving
    from its partner.

    @input gets_interfere, callable (victim, partner, tx, rx) -> bool
    @output intf_stas, a list of [tx, rx, victim, partner]
    '''
    intf_stas = []
    for sta in topology.neigh_nodes:
        for link in topology.link_list:
            if sta not in link:
                continue
            neigh_id = link[1] if sta == link[0] else link[0]

            for a_intf, b_intf in topology.link_list:
                if sta in (a_intf, b_intf) or neigh_id in (a_intf, b_intf):
                    continue

                if gets_interfere(a_intf, b_intf, sta, neigh_id):
                    intf_stas.append([sta, neigh_id, a_intf, b_intf])
                if gets_interfere(b_intf, a_intf, sta, neigh_id):
                    intf_stas.append([sta, neigh_id, b_intf, a_intf])

    return intf_stas


def is_recorded(intf_set, cliques):
    for clique in cliques:
        if all(n in clique.members for n in intf_set):
            return True
    return False


def add_interference_cliques(topology, intf_stas):
    '''
    Append one interference clique per new set of 4 stations.
    Only the two hops of the set are mapped into the clique, not every hop touching its members.
    - Make changes to topology's 'cliques', 'interference_start'
    '''
    # drop interference cliques from a previous run
    topology.cliques = topology.cliques[:topology.interference_start]
    topology.interference_start = len(topology.cliques)

    for intf_set in intf_stas:
        if is_recorded(intf_set, topology.interference_cliques()):
            continue

        clique = element.Clique(len(topology.cliques), intf_set, is_interference=True)
        pairs = [(intf_set[0], intf_set[1]), (intf_set[2], intf_set[3])]

        for f, path in enumerate(topology.flows_path):
            for i in range(len(path) - 1):
                if (path[i], path[i + 1]) in pairs or (path[i + 1], path[i]) in pairs:
                    clique.add_segment((f, path[i], path[i + 1]))

        topology.cliques.append(clique)

    print("===========Finish adding {} interference cliques============".format(len(topology.interference_cliques())))

    return topology.interference_cliques()


def configure_interference(topology, gets_interfere):
    intf_stas = get_interference_sets(topology, gets_interfere)
    return add_interference_cliques(topology, intf_stas)
