import os
import jax

def set_backend(platform: str = "cpu", *, force: bool = False):
    """
    Must be called before the first computation to take effect.
    platform: cpu / gpu / tpu
    force   : Whether to override user-set environment variables
    """
    key = "JAX_PLATFORMS"
    if force or key not in os.environ:
        os.environ[key] = platform
    jax.config.update("jax_platforms", platform)

def enable_x64():
    """
    Switch JAX to 64-bit floats and ints.
    PageRank tolerances down to 1e-15 are meaningless in float32.
    """
    jax.config.update("jax_enable_x64", True)
