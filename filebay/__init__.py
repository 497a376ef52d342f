"""Filebay - a filesystem subtree served as a resource collection."""

__version__ = "0.1.0"
