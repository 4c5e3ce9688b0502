import jax
import jax.numpy as jnp
from jax.experimental.sparse import BCOO
from ..graphs import Graph
from ..errors import EmptyGraphError, InvalidWeightError

# --- Internal JIT-compiled pure functions ---

@jax.jit
def _sink_mask_pure(adj: jnp.ndarray) -> jnp.ndarray:
    """Pure function: rows with no mass outside the diagonal."""
    loops = jnp.diag(adj)
    return (jnp.sum(adj, axis=1) - loops) == 0

@jax.jit
def _transition_matrix_pure(adj: jnp.ndarray) -> jnp.ndarray:
    """
    Pure function version of the damped-walk transition matrix.

    Sink rows are replaced by all ones, keeping a zero diagonal where the node
    had no self-loop. Rows are then normalized and the result transposed so
    that ``P @ x`` advances the walk by one step.
    """
    n_nodes = adj.shape[0]
    loops = jnp.diag(adj)
    is_sink = _sink_mask_pure(adj)

    sink_rows = jnp.ones_like(adj)
    if n_nodes > 1:
        # A lone node keeps its diagonal, otherwise its row would be empty
        no_loop = jnp.eye(n_nodes, dtype=bool) & (loops == 0)[:, None]
        sink_rows = jnp.where(no_loop, 0.0, sink_rows)

    adj = jnp.where(is_sink[:, None], sink_rows, adj)

    # L_rw style row normalization (D^-1 A); every row sum is positive here
    row_sums = jnp.sum(adj, axis=1)
    return (adj / row_sums[:, None]).T


# --- External call wrapper functions ---

def _checked_adjacency(graph: Graph) -> jnp.ndarray:
    """Adjacency matrix after the fatal input checks."""
    if graph.n_nodes == 0:
        raise EmptyGraphError("PageRank is undefined for a graph with no nodes.")

    adj = graph.to_adjacency_matrix()
    if graph.is_weighted() and bool(jnp.any(~jnp.isfinite(graph.edge_weights) | (graph.edge_weights < 0))):
        raise InvalidWeightError("Arc weights must be finite and non-negative.")
    if bool(jnp.any(~jnp.isfinite(adj) | (adj < 0))):
        raise InvalidWeightError("Arc weights must be finite and non-negative.")
    return adj

def sink_mask(graph: Graph) -> jnp.ndarray:
    """
    Boolean mask of sink (dangling) nodes: nodes whose only outgoing arcs,
    if any, are self-loops.
    """
    return _sink_mask_pure(_checked_adjacency(graph))

def transition_matrix(graph: Graph, sparse: bool = True) -> BCOO | jnp.ndarray:
    """
    Build the column-stochastic transition matrix ``P`` of a graph.

    ``P[i, j]`` is the probability that the walk moves from node ``j`` to
    node ``i``. Weighted graphs use their arc weights, unweighted graphs count
    each arc as 1. Sinks are connected uniformly to every other node.
    The adjacency is assembled densely before conversion, so memory is O(N^2)
    even when ``sparse=True``.

    Args:
        graph (Graph): Input graph, directed or undirected.
        sparse (bool): Return a BCOO sparse matrix (default) or a dense array.

    Returns:
        BCOO | jnp.ndarray: float64 matrix of shape (n_nodes, n_nodes).

    Raises:
        EmptyGraphError: The graph has no nodes.
        InvalidWeightError: An arc weight is negative, NaN or infinite.
    """
    P = _transition_matrix_pure(_checked_adjacency(graph))
    if sparse:
        return BCOO.fromdense(P)
    return P
