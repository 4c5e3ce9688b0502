def get_jax_env_info() -> dict:
    """
    Describe the runtime the PageRank solvers execute on.

    Reports library versions, whether 64-bit mode is active, the selected
    platform and the visible devices. Does not change any configuration.
    """
    import os
    import platform
    import sys

    import jax
    import jax.numpy as jnp
    import jaxlib
    import networkx as nx
    import numpy as np
    import psutil

    info = {
        "system": {
            "os": platform.platform(),
            "arch": platform.machine(),
            "cpu_count": os.cpu_count(),
            "ram_gb": round(psutil.virtual_memory().total / 1024**3, 1),
            "python": sys.version,
        },
        "versions": {
            "jax": jax.__version__,
            "jaxlib": jaxlib.__version__,
            "numpy": np.__version__,
            "networkx": nx.__version__,
        },
        "jax": {
            "x64_enabled": jnp.array(0.0).dtype == jnp.float64,
            "platforms_env": os.environ.get("JAX_PLATFORMS"),
        },
        "devices": [],
    }

    try:
        info["devices"] = [
            {"id": i, "platform": d.platform, "device_kind": d.device_kind}
            for i, d in enumerate(jax.devices())
        ]
        info["jax"]["default_backend"] = jax.default_backend()
    except RuntimeError as e:
        # No backend could be initialized for the requested platform
        info["jax"]["device_error"] = str(e)

    return info
