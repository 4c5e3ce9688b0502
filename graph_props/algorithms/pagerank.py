"""
PageRank by damped power iteration.

The transition matrix ``P`` is built once per call (see
``kernels.matrix.transition_matrix``) and handed to one of three solvers.
All solvers share ``kernels.power.power_step``,

    x_{k+1} = alpha_k * P @ x_k + (1 - alpha_k) / N,

and stop on the L1 test ``||x_{k+1} - x_k||_1 < eps_k`` or when ``max_iter``
steps have been taken. They differ only in how ``alpha_k`` and ``eps_k``
are scheduled:

- ``classical``: ``alpha_k = d`` and ``eps_k = tol``.
- ``iterative``: ``alpha_k = 1 - 1 / (k + 2)^p`` with ``p = log2(1 / (1 - d))``
  (Polyak & Timonina, 2011), ``eps_k = tol``.
- ``adaptive``: damping ``1 - t`` held until the residual drops to ``t``,
  then ``t`` is halved, starting at ``t = 1 - d`` and ending at ``tol``.
"""

import math
import numbers
import warnings
from collections import namedtuple
from typing import Callable, Dict

import jax
import jax.numpy as jnp

from ..errors import (
    InvalidConfigError,
    MaxIterationsExceeded,
    ScheduleRangeWarning,
    UnknownMethodError,
)
from ..graphs import Graph
from ..kernels.matrix import transition_matrix
from ..kernels.power import power_step, uniform_vector


# ============================================================================
# Configuration and results
# ============================================================================

PageRankConfig = namedtuple('PageRankConfig', ['d', 'tol', 'max_iter', 'method'],
                            defaults=(0.85, 1e-6, 100, 'classical'))

PageRankResult = namedtuple('PageRankResult',
                            ['rank', 'n_iter', 'residual', 'converged', 'method'])


# ============================================================================
# Solvers
# ============================================================================

@jax.jit
def _classical_pagerank(P, d, tol, max_iter):
    """Constant damping ``d`` until the residual drops below ``tol``."""
    x0 = uniform_vector(P.shape[0])

    def cond(state):
        _, residual, k = state
        return (residual >= tol) & (k < max_iter)

    def body(state):
        x, _, k = state
        x_next, residual = power_step(P, x, d)
        return x_next, residual, k + 1

    init = (x0, jnp.asarray(jnp.inf, dtype=jnp.float64), jnp.asarray(0, dtype=jnp.int32))
    x, residual, k = jax.lax.while_loop(cond, body, init)

    # Re-normalize against floating-point drift
    return x / jnp.sum(x), residual, k, residual < tol


@jax.jit
def _iterative_regularization_pagerank(P, d, tol, max_iter):
    """Damping grows as ``1 - 1/(k+2)^p`` over the 1-indexed step ``k``."""
    x0 = uniform_vector(P.shape[0])
    p = jnp.log2(1.0 / (1.0 - d))

    def cond(state):
        _, residual, k = state
        return (residual >= tol) & (k < max_iter)

    def body(state):
        x, _, k = state
        # k counts completed steps, so this is step k + 1
        alpha = 1.0 - 1.0 / (k.astype(jnp.float64) + 3.0) ** p
        x_next, residual = power_step(P, x, alpha)
        return x_next, residual, k + 1

    init = (x0, jnp.asarray(jnp.inf, dtype=jnp.float64), jnp.asarray(0, dtype=jnp.int32))
    x, residual, k = jax.lax.while_loop(cond, body, init)
    return x, residual, k, residual < tol


@jax.jit
def _adaptive_regularization_pagerank(P, d, tol, max_iter):
    """
    Hold damping at ``1 - t`` until the residual is at most ``t``, then halve
    ``t`` (never below ``tol``). The inner and outer loops share one step
    counter; when it reaches ``max_iter`` the current vector is returned as-is.
    """
    n_nodes = P.shape[0]
    x0 = uniform_vector(n_nodes)
    # One-hot sentinel so the first outer pass always runs
    prev0 = jnp.zeros(n_nodes, dtype=jnp.float64).at[0].set(1.0)
    residual0 = jnp.sum(jnp.abs(x0 - prev0))
    this_tol0 = jnp.asarray(1.0 - d, dtype=jnp.float64)

    def inner_cond(state):
        _, residual, this_tol, k = state
        return (residual > this_tol) & (k < max_iter)

    def inner_body(state):
        x, _, this_tol, k = state
        x_next, residual = power_step(P, x, 1.0 - this_tol)
        return x_next, residual, this_tol, k + 1

    def outer_cond(state):
        _, residual, this_tol, k = state
        return ((residual > tol) | (this_tol > tol)) & (k < max_iter)

    def outer_body(state):
        x, residual, this_tol, k = jax.lax.while_loop(inner_cond, inner_body, state)
        return x, residual, jnp.maximum(tol, this_tol / 2), k

    init = (x0, residual0, this_tol0, jnp.asarray(0, dtype=jnp.int32))
    x, residual, this_tol, k = jax.lax.while_loop(outer_cond, outer_body, init)
    return x, residual, k, (residual <= tol) & (this_tol <= tol)


_METHODS: Dict[str, Callable] = {
    "classical": _classical_pagerank,
    "iterative": _iterative_regularization_pagerank,
    "adaptive": _adaptive_regularization_pagerank,
}


# ============================================================================
# Public API
# ============================================================================

def available_methods() -> dict:
    """
    Get information about the registered PageRank solvers.

    Returns:
        dict: Method names and their damping/tolerance schedules
    """
    return {
        "classical": {
            "damping": "constant d",
            "tolerance": "constant tol",
            "normalized": "explicitly, after the last step",
        },
        "iterative": {
            "damping": "1 - 1/(k+2)^p, p = log2(1/(1-d))",
            "tolerance": "constant tol",
            "valid_d": "(0, 0.5)",
        },
        "adaptive": {
            "damping": "1 - t, t halved from 1 - d down to tol",
            "tolerance": "t, tightened with the damping",
        },
    }


def validate_config(config: PageRankConfig) -> None:
    """
    Check a PageRank configuration.

    Raises:
        UnknownMethodError: ``config.method`` is not a registered solver.
        InvalidConfigError: ``d`` outside (0, 1), ``tol`` not positive, or
            ``max_iter`` not a positive integer.
    """
    if config.method not in _METHODS:
        raise UnknownMethodError(
            f"Unknown PageRank method: {config.method!r}. "
            f"Expected one of {sorted(_METHODS)}"
        )
    if not 0.0 < config.d < 1.0:
        raise InvalidConfigError(f"Damping factor d must lie in (0, 1), got {config.d}")
    if not config.tol > 0.0:
        raise InvalidConfigError(f"Tolerance must be positive, got {config.tol}")
    max_iter = config.max_iter
    if (isinstance(max_iter, bool) or not isinstance(max_iter, numbers.Real)
            or not math.isfinite(max_iter) or int(max_iter) != max_iter or max_iter < 1):
        raise InvalidConfigError(f"max_iter must be a positive integer, got {config.max_iter}")


def pagerank_with_info(config: PageRankConfig, graph: Graph) -> PageRankResult:
    """
    Compute PageRank and return the rank vector with convergence diagnostics.

    Args:
        config (PageRankConfig): Damping factor, tolerance, iteration budget
            and solver method.
        graph (Graph): Input graph, optionally weighted.

    Returns:
        PageRankResult: ``rank`` (float64 vector summing to ~1), ``n_iter``
        (power steps taken), ``residual`` (last L1 step size), ``converged``
        and ``method``.

    Raises:
        UnknownMethodError, InvalidConfigError: Bad configuration.
        EmptyGraphError: The graph has no nodes.
        InvalidWeightError: An arc carries a negative weight.

    Warns:
        MaxIterationsExceeded: The budget ran out before convergence. The last
            vector is still returned.
        ScheduleRangeWarning: ``iterative`` used with ``d`` outside (0, 0.5).
    """
    validate_config(config)
    if config.method == "iterative" and config.d >= 0.5:
        warnings.warn(
            f"The iterative schedule expects d in (0, 0.5), got {config.d}. "
            "Convergence may be slow or the budget may run out.",
            ScheduleRangeWarning,
            stacklevel=2
        )

    P = transition_matrix(graph)
    solver = _METHODS[config.method]
    rank, residual, k, converged = solver(P, float(config.d), float(config.tol), int(config.max_iter))

    result = PageRankResult(
        rank=rank,
        n_iter=int(k),
        residual=float(residual),
        converged=bool(converged),
        method=config.method,
    )

    if not result.converged:
        warnings.warn(
            f"max_iter reached: {config.method} PageRank stopped after {result.n_iter} "
            f"iterations with residual {result.residual:.3e} (tol={config.tol})",
            MaxIterationsExceeded,
            stacklevel=2
        )

    return result


def compute_pagerank(config: PageRankConfig, graph: Graph) -> jnp.ndarray:
    """
    Compute the PageRank values of the nodes in ``graph``.

    Example:
        >>> g = from_networkx(nx.star_graph(4))
        >>> compute_pagerank(PageRankConfig(d=0.85, tol=1e-10, max_iter=1000), g)

    Returns:
        jnp.ndarray: One float64 score per node, in node index order.
    """
    return pagerank_with_info(config, graph).rank


def pagerank(
    graph: Graph,
    d: float = 0.85,
    tol: float = 1e-6,
    max_iter: int = 100,
    method: str = "classical"
) -> jnp.ndarray:
    """Keyword-argument shortcut for ``compute_pagerank``."""
    return compute_pagerank(PageRankConfig(d=d, tol=tol, max_iter=max_iter, method=method), graph)


def pagerank_dict(config: PageRankConfig, graph: Graph) -> dict:
    """PageRank keyed by the graph's original node ids (as ``networkx.pagerank`` does)."""
    return graph.map_jax_results_to_original(compute_pagerank(config, graph))
