from meshsched import element
from meshsched.errors import MalformedTopologyError


def check_flows_path(flows_path, gateway):
    '''
    Reject flow paths the clique construction cannot handle
    '''
    if len(flows_path) == 0:
        raise MalformedTopologyError("There is no flow to schedule")

    nodes_in_topo = set()
    for f, path in enumerate(flows_path):
        if len(path) < 2:
            raise MalformedTopologyError("Flow {} has less than 2 stations: {}".format(f, path))
        for n in path:
            if not isinstance(n, int) or isinstance(n, bool) or n < 0:
                raise MalformedTopologyError("Flow {} has an invalid node id {}".format(f, n))
        if len(set(path)) != len(path):
            raise MalformedTopologyError("Flow {} does not follow a simple path: {}".format(f, path))
        nodes_in_topo.update(path)

    if gateway not in nodes_in_topo:
        raise MalformedTopologyError("Gateway {} is not traversed by any flow".format(gateway))


def get_link_list(flows_path):
    '''
    Direction-independent links, each noted as (max, min) and sorted

    e.g. flow 0 --> 1 --> 2 and flow 2 --> 1 give [(1, 0), (2, 1)]
    '''
    link_list = []
    for path in flows_path:
        for i in range(len(path) - 1):
            link = (max(path[i], path[i + 1]), min(path[i], path[i + 1]))
            # small topologies: a linear scan is enough
            if link not in link_list:
                link_list.append(link)

    link_list.sort()
    return link_list


def get_neigh_nodes(link_list):
    '''
    @output neigh_nodes, dict node_id -> list of neighbours in link-list order
    '''
    nodes = sorted(set(n for link in link_list for n in link))

    neigh_nodes = {}
    for n in nodes:
        neighbours = []
        for link in link_list:
            if n == link[0]:
                neighbours.append(link[1])
            if n == link[1]:
                neighbours.append(link[0])
        neigh_nodes[n] = neighbours

    return neigh_nodes


def get_conflict_cliques(neigh_nodes):
    '''
    A node with more than one neighbour is a conflict node: all its links share one radio.
    Its clique holds the neighbours plus the node itself, which is put last.
    '''
    cliques = []
    for n, neighbours in neigh_nodes.items():
        if len(neighbours) > 1:
            cliques.append(element.Clique(len(cliques), neighbours + [n], conflict_node=n))

    return cliques


def record_segments(cliques, flows_path):
    '''
    Make changes to cliques' 'segments': a hop belongs to a clique if both of its stations are members
    '''
    for f, path in enumerate(flows_path):
        for clique in cliques:
            for i in range(len(path) - 1):
                if path[i] in clique.members and path[i + 1] in clique.members:
                    clique.add_segment((f, path[i], path[i + 1]))

    return cliques


def get_standalone_links(cliques, flows_path):
    '''
    Hops not arbitrated by any clique (no conflict node on either end).
    Each one still gets a single-segment budget so its capacity bounds the flow.
    '''
    standalone = []
    for f, path in enumerate(flows_path):
        for i in range(len(path) - 1):
            covered = any(path[i] in c.members and path[i + 1] in c.members for c in cliques)
            if not covered:
                link_clique = element.Clique(None, [path[i], path[i + 1]])
                link_clique.add_segment((f, path[i], path[i + 1]))
                standalone.append(link_clique)

    return standalone


def build_topology(flows_path, gateway):
    '''
    Build the link list, the neighbourhood and the classic cliques from the flow paths
    '''
    check_flows_path(flows_path, gateway)

    topology = element.Topology(flows_path, gateway)
    topology.link_list = get_link_list(topology.flows_path)
    topology.neigh_nodes = get_neigh_nodes(topology.link_list)

    cliques = get_conflict_cliques(topology.neigh_nodes)
    topology.cliques = record_segments(cliques, topology.flows_path)
    topology.standalone = get_standalone_links(topology.cliques, topology.flows_path)
    topology.interference_start = len(topology.cliques)

    print("===========Finish building {} links and {} cliques============".format(len(topology.link_list), len(topology.cliques)))

    return topology
