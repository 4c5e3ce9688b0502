import jax
import jax.numpy as jnp
from jax.experimental.sparse import BCOO


@jax.jit
def power_step(P: BCOO | jnp.ndarray, x: jnp.ndarray, alpha: float) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    One damped power-iteration step.

    Computes ``x_next = alpha * P @ x + (1 - alpha) / n`` and the L1 distance
    between ``x_next`` and ``x``.

    Args:
        P: Column-stochastic transition matrix, sparse or dense.
        x: Current rank vector of shape (n,).
        alpha: Damping coefficient for this step.

    Returns:
        tuple[jnp.ndarray, jnp.ndarray]: (x_next, residual)
    """
    n = x.shape[0]
    x_next = alpha * (P @ x) + (1.0 - alpha) / n
    residual = jnp.sum(jnp.abs(x_next - x))
    return x_next, residual


def uniform_vector(n: int) -> jnp.ndarray:
    """Initial rank vector (1/n, ..., 1/n) in float64."""
    return jnp.full(n, 1.0 / n, dtype=jnp.float64)
