"""
dashgraph - reshapes dimensional time-series data into dashboard chart points
and derives the summary statistics shown next to each chart.
"""

from dashgraph.services.graph_model import GraphModel

__version__ = "0.1.0"

__all__ = ["GraphModel", "__version__"]
