"""Pure graphing package for queueAdmin.

This package turns queue metric requests into Graphite targets, render URLs,
and rate queries. It must not import Django or perform any network I/O.
"""

from .graph_options import GraphOptions, GraphSettings, resolve_graph_options

__all__ = ["GraphOptions", "GraphSettings", "resolve_graph_options"]
