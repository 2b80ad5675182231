"""Graph file persistence."""

from .graph_file_repository import GraphFileRepository, read_graph, write_graph

__all__ = ["GraphFileRepository", "read_graph", "write_graph"]
