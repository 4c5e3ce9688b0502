# graph_props/algorithms/__init__.py
from .pagerank import (
    PageRankConfig,
    PageRankResult,
    available_methods,
    validate_config,
    compute_pagerank,
    pagerank_with_info,
    pagerank,
    pagerank_dict
)
