from .graph import Graph
from .io import from_networkx, from_edge_list, to_networkx
