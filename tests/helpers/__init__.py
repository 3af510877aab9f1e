from .cluster import BuildSimulator, InMemoryCluster

__all__ = [
    "BuildSimulator",
    "InMemoryCluster",
]
