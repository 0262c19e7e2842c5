import networkx as nx

from meshsched.errors import MalformedTopologyError


def get_conflict_graph(topology):
    '''
    Graph over the gateway and the conflict nodes, edges are the links between them.
    Edges are added in neighbour-list order so that the BFS below is deterministic.
    '''
    conflict_nodes = topology.get_conflict_nodes()
    keep = set(conflict_nodes) | {topology.gateway}

    G = nx.Graph()
    G.add_nodes_from(sorted(keep))
    for n in sorted(keep):
        for nn in topology.neigh_nodes.get(n, []):
            if nn in keep:
                G.add_edge(n, nn)

    return G


def configure_hierarchy(topology):
    '''
    Breadth-first search from the gateway over conflict nodes.
    - Make changes to cliques' 'master', 'master_clique'
    - Make changes to topology's 'scheduling_order', 'hierarchy', 'master'

    A clique always comes after its master clique in the scheduling order.
    The gateway's clique (if any) is the root; when the gateway is not a conflict node,
    the cliques next to it have no master clique and are scheduled as roots too.
    '''
    conflict_nodes = topology.get_conflict_nodes()
    gateway = topology.gateway

    G = get_conflict_graph(topology)
    bfs_edges = list(nx.bfs_edges(G, gateway))

    # nothing is committed before every conflict node is known to be reachable
    reached = {gateway} | {n for _, n in bfs_edges}
    orphans = [n for n in conflict_nodes if n not in reached]
    if len(orphans) > 0:
        raise MalformedTopologyError("Conflict nodes {} cannot be reached from gateway {}".format(orphans, gateway))

    topology.scheduling_order = []
    topology.master = {n: None for n in conflict_nodes}
    for clique in topology.real_cliques():
        clique.master = None
        clique.master_clique = None

    gw_clique = topology.get_clique_id(gateway)
    if gw_clique is not None:
        topology.scheduling_order.append(gw_clique)

    # level 0 is the gateway
    level = {gateway: 0}
    topology.hierarchy = [[gateway]]

    for master_id, n in bfs_edges:
        c = topology.get_clique_id(n)
        clique = topology.cliques[c]
        clique.master = master_id
        clique.master_clique = topology.get_clique_id(master_id)
        topology.master[n] = master_id
        topology.scheduling_order.append(c)

        level[n] = level[master_id] + 1
        if len(topology.hierarchy) <= level[n]:
            topology.hierarchy.append([])
        topology.hierarchy[level[n]].append(n)

    for l, nodes in enumerate(topology.hierarchy):
        print("Level {} : {}".format(l, nodes))
    print("===========Finish the construction of the clique hierarchy============")

    return topology.scheduling_order
