"""
graph_props: node-importance scores for directed, weighted graphs on JAX.

Importing the package turns on JAX 64-bit mode; the solvers compute in
float64 throughout.
"""

from .utils import enable_x64

enable_x64()

from . import graphs, kernels, algorithms, errors
from .graphs import Graph, from_networkx, from_edge_list, to_networkx
from .algorithms import (
    PageRankConfig,
    PageRankResult,
    available_methods,
    compute_pagerank,
    pagerank_with_info,
    pagerank,
    pagerank_dict
)
from .errors import (
    InvalidWeightError,
    EmptyGraphError,
    UnknownMethodError,
    InvalidConfigError,
    MaxIterationsExceeded,
    ScheduleRangeWarning
)

__version__ = "0.1.0"
