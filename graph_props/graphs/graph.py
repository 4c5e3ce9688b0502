import jax
import jax.numpy as jnp
from functools import partial
from typing import Optional
from dataclasses import dataclass
import jax.tree_util

# --- Internal JIT-compiled pure functions ---

@partial(jax.jit, static_argnames=('n_nodes', 'n_edges'))
def _to_adjacency_matrix_pure(
    senders: jnp.ndarray,
    receivers: jnp.ndarray,
    edge_weights: Optional[jnp.ndarray],
    n_nodes: int,
    n_edges: int
) -> jnp.ndarray:
    """Pure function converting arc lists into a dense float64 adjacency matrix."""
    if edge_weights is not None:
        weights = edge_weights.astype(jnp.float64)
    else:
        # Unweighted arcs count as weight 1.0
        weights = jnp.ones(n_edges, dtype=jnp.float64)

    adj = jnp.zeros((n_nodes, n_nodes), dtype=jnp.float64)
    # Parallel arcs between the same ordered pair accumulate
    adj = adj.at[senders, receivers].add(weights)
    return adj

# --- Graph data structure ---

@dataclass
class Graph:
    """
    A JAX-compatible sparse graph data structure, registered as a JAX Pytree.

    Arcs are stored as parallel ``senders``/``receivers`` index arrays. An
    undirected graph is stored as symmetric arc pairs and remembers that it
    was undirected through ``directed=False``. Node indices run from 0 to
    ``n_nodes - 1``; the caller's original node ids are kept in
    ``_index_to_node``.
    """
    senders: jnp.ndarray
    receivers: jnp.ndarray
    edge_weights: jnp.ndarray | None
    n_nodes: int
    n_edges: int
    directed: bool = True
    # JAX index -> original node id (tuple so it can live in aux_data)
    _index_to_node: tuple | None = None

    def tree_flatten(self):
        """
        Flattens the Graph into its array components (children) and the
        static, hashable metadata (aux_data).
        """
        children = (self.senders, self.receivers, self.edge_weights)
        aux_data = (self.n_nodes, self.n_edges, self.directed, self._index_to_node)
        return (children, aux_data)

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        """Reconstructs a Graph from its children and aux_data."""
        senders, receivers, edge_weights = children
        n_nodes, n_edges, directed, index_to_node = aux_data
        return cls(
            senders=senders,
            receivers=receivers,
            edge_weights=edge_weights,
            n_nodes=n_nodes,
            n_edges=n_edges,
            directed=directed,
            _index_to_node=index_to_node
        )

    def get_original_node_id(self, jax_index: int):
        """Get the original node id from a JAX index."""
        if self._index_to_node is None:
            return jax_index
        return self._index_to_node[jax_index]

    def map_jax_results_to_original(self, jax_results: jnp.ndarray) -> dict:
        """Map per-node results (indexed by JAX index) back to original node ids."""
        return {self.get_original_node_id(i): float(jax_results[i]) for i in range(len(jax_results))}

    def is_weighted(self) -> bool:
        """True when the graph carries explicit arc weights."""
        return self.edge_weights is not None

    def is_undirected(self) -> bool:
        return not self.directed

    def out_neighbors(self, node: int) -> list:
        """Indices of the heads of the arcs leaving ``node``."""
        return sorted({int(v) for v in self.receivers[self.senders == node].tolist()})

    def in_neighbors(self, node: int) -> list:
        """Indices of the tails of the arcs entering ``node``."""
        return sorted({int(u) for u in self.senders[self.receivers == node].tolist()})

    def get_weight(self, u: int, v: int) -> float:
        """Total weight of the arcs u -> v (0.0 when there is none)."""
        mask = (self.senders == u) & (self.receivers == v)
        if self.edge_weights is None:
            return float(jnp.sum(mask))
        return float(jnp.sum(jnp.where(mask, self.edge_weights, 0.0)))

    def __str__(self) -> str:
        if self.directed:
            edge_count = self.n_edges
            graph_type = "directed"
        else:
            # Self-loops are stored once, every other edge twice
            n_loops = int(jnp.sum(self.senders == self.receivers))
            edge_count = (self.n_edges + n_loops) // 2
            graph_type = "undirected"
        return f"Graph({self.n_nodes} nodes, {edge_count} edges, {graph_type})"

    def __repr__(self) -> str:
        return self.__str__()

    def to_adjacency_matrix(self) -> jnp.ndarray:
        """Dense adjacency matrix, weighted when the graph carries weights."""
        return _to_adjacency_matrix_pure(
            senders=self.senders,
            receivers=self.receivers,
            edge_weights=self.edge_weights,
            n_nodes=self.n_nodes,
            n_edges=self.n_edges
        )

# Register the Graph class as a custom Pytree node for JAX
jax.tree_util.register_pytree_node_class(Graph)
