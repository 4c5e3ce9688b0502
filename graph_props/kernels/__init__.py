# graph_props/kernels/__init__.py
from .matrix import transition_matrix, sink_mask
from .power import power_step, uniform_vector
