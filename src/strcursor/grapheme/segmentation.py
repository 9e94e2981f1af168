"""Extended grapheme cluster segmentation backed by the ``regex`` module's ``\\X``."""

from __future__ import annotations

from typing import Iterator, Optional

import regex

GRAPHEME_PATTERN = regex.compile(r"\X")


def first_cluster(text: str) -> Optional[str]:
    """Return the leading extended grapheme cluster of ``text``, if any."""

    match = GRAPHEME_PATTERN.match(text)
    if match is None:
        return None
    return match.group()


def iter_clusters(text: str) -> Iterator[str]:
    """Yield the clusters covering ``text`` in order."""

    for match in GRAPHEME_PATTERN.finditer(text):
        yield match.group()


def cluster_byte_lengths(text: str) -> Iterator[int]:
    for cluster in iter_clusters(text):
        yield len(cluster.encode("utf-8"))


def breaks_between(before: str, after: str) -> bool:
    """``True`` when a cluster boundary separates two code points in every context.

    Only pairs decide the outcome once ``before`` cannot extend the cluster
    in front of it: the rules that look further left (emoji ZWJ sequences,
    Indic conjuncts, regional indicator parity) all need ``before`` to be an
    extending character or a regional indicator, and a pair of regional
    indicators never breaks on its own.
    """

    if first_cluster("a" + before) != "a":
        return False
    return first_cluster(before + after) == before


__all__ = [
    "GRAPHEME_PATTERN",
    "first_cluster",
    "iter_clusters",
    "cluster_byte_lengths",
    "breaks_between",
]
