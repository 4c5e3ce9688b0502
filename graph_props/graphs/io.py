import jax.numpy as jnp
import networkx as nx
from typing import Hashable, Optional, Sequence

from .graph import Graph

def from_networkx(g: nx.Graph, weight: Optional[str] = "weight") -> Graph:
    """
    Create Graph from a NetworkX graph object.

    Args:
        g: ``nx.Graph`` or ``nx.DiGraph``. Undirected edges become two arcs,
            self-loops become a single arc.
        weight: Edge attribute holding the weight. Missing attributes count
            as 1.0. Pass None to ignore weights entirely.

    Returns:
        Graph: Arc lists indexed by node position in ``g.nodes()``.
    """
    if not isinstance(g, (nx.Graph, nx.DiGraph)):
        raise TypeError(f"Only nx.Graph and nx.DiGraph are supported, but got {type(g)}")
    if g.is_multigraph():
        raise TypeError("Multigraphs are not supported, collapse parallel edges first")

    all_nodes = list(g.nodes())
    node_to_index = {node: idx for idx, node in enumerate(all_nodes)}

    senders, receivers, weights_list = [], [], []
    for u, v, data in g.edges(data=True):
        u_idx = node_to_index[u]
        v_idx = node_to_index[v]
        w = data.get(weight, 1.0) if weight is not None else 1.0

        senders.append(u_idx)
        receivers.append(v_idx)
        weights_list.append(w)

        if not g.is_directed() and u_idx != v_idx:
            senders.append(v_idx)
            receivers.append(u_idx)
            weights_list.append(w)

    # Only keep weights when at least one differs from the implicit 1.0
    weights = None
    if any(w != 1.0 for w in weights_list):
        weights = jnp.array(weights_list, dtype=jnp.float64)

    return Graph(
        senders=jnp.array(senders, dtype=jnp.int32),
        receivers=jnp.array(receivers, dtype=jnp.int32),
        edge_weights=weights,
        n_nodes=len(all_nodes),
        n_edges=len(senders),
        directed=g.is_directed(),
        _index_to_node=tuple(all_nodes)
    )

def from_edge_list(
    sources: Sequence[int],
    targets: Sequence[int],
    weights: Optional[Sequence[float]] = None,
    n_nodes: Optional[int] = None,
    directed: bool = True,
    one_indexed: bool = False,
    node_ids: Optional[Sequence[Hashable]] = None
) -> Graph:
    """
    Create Graph from parallel source/target (and optional weight) lists.

    Args:
        sources, targets: Arc endpoints.
        weights: Arc weights; None means an unweighted graph.
        n_nodes: Number of nodes. Inferred from the largest index when omitted,
            so trailing isolated nodes need an explicit count.
        directed: When False every non-loop pair is added in both directions.
        one_indexed: Node indices start at 1 instead of 0.
        node_ids: Original ids for the nodes, used when mapping results back.
    """
    if len(sources) != len(targets):
        raise ValueError("sources and targets must have the same length")
    if weights is not None and len(weights) != len(sources):
        raise ValueError("weights must have the same length as sources")

    offset = 1 if one_indexed else 0
    src = [int(s) - offset for s in sources]
    dst = [int(t) - offset for t in targets]
    if any(i < 0 for i in src + dst):
        raise ValueError("Node indices must be non-negative")

    if n_nodes is None:
        n_nodes = max(src + dst) + 1 if src else 0
    elif src and max(src + dst) >= n_nodes:
        raise ValueError(f"Arc endpoint out of range for a graph with {n_nodes} nodes")

    w = list(weights) if weights is not None else [1.0] * len(src)
    senders, receivers, weights_list = list(src), list(dst), list(w)
    if not directed:
        for u, v, wt in zip(src, dst, w):
            if u != v:
                senders.append(v)
                receivers.append(u)
                weights_list.append(wt)

    if node_ids is not None and len(node_ids) != n_nodes:
        raise ValueError("node_ids must have one entry per node")
    if node_ids is None and one_indexed:
        node_ids = range(1, n_nodes + 1)

    return Graph(
        senders=jnp.array(senders, dtype=jnp.int32),
        receivers=jnp.array(receivers, dtype=jnp.int32),
        edge_weights=jnp.array(weights_list, dtype=jnp.float64) if weights is not None else None,
        n_nodes=n_nodes,
        n_edges=len(senders),
        directed=directed,
        _index_to_node=tuple(node_ids) if node_ids is not None else None
    )

def to_networkx(graph: Graph) -> nx.Graph:
    """Convert a Graph back into a NetworkX graph (DiGraph when directed)."""
    g = nx.DiGraph() if graph.directed else nx.Graph()
    g.add_nodes_from(graph.get_original_node_id(i) for i in range(graph.n_nodes))

    weights = graph.edge_weights.tolist() if graph.edge_weights is not None else [1.0] * graph.n_edges
    for u, v, w in zip(graph.senders.tolist(), graph.receivers.tolist(), weights):
        g.add_edge(graph.get_original_node_id(u), graph.get_original_node_id(v), weight=w)
    return g
