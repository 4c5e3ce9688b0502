from .set_backend import set_backend, enable_x64
from .hardware_detector import get_jax_env_info
