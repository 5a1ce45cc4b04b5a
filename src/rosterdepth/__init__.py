"""Cluster-based roster depth rankings for basketball teams."""

__version__ = "0.1.0"
