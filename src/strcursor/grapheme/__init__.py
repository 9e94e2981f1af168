"""Grapheme cluster segmentation and single-cluster types."""

from .cluster import Grapheme, GraphemeBuf, Operand, OperandKind, compare, normalize
from .segmentation import first_cluster, iter_clusters

__all__ = [
    "Grapheme",
    "GraphemeBuf",
    "Operand",
    "OperandKind",
    "compare",
    "normalize",
    "first_cluster",
    "iter_clusters",
]
