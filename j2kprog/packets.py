from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple, TypeVar
import numpy as np

from .progression import PrecinctCount, ProgressionData, ProgressionIterator

T = TypeVar("T")


def packet_count(layer_count: int, max_decomposition_levels: int, component_count: int,
                 precinct_count: PrecinctCount) -> int:
    """Number of packets in a tile: sum over (r, i) of layer_count * numprecincts(r, i)."""
    total = 0
    for r in range(max_decomposition_levels + 1):
        for i in range(component_count):
            total += layer_count * precinct_count(r, i)
    return total


def collect_progression(it: ProgressionIterator) -> List[ProgressionData]:
    out: List[ProgressionData] = []
    while it.has_next():
        out.append(it.next())
    return out


def progression_array(it: ProgressionIterator) -> np.ndarray:
    """Drain the iterator into an (N, 4) int32 array: layer, resolution, component, precinct."""
    rows = [p.as_tuple() for p in collect_progression(it)]
    if not rows:
        return np.empty((0, 4), dtype=np.int32)
    return np.asarray(rows, dtype=np.int32)


def assign_packets(it: ProgressionIterator, packets: Iterable[T]) -> List[Tuple[ProgressionData, T]]:
    """
    Pair packets, in codestream order, with their coordinates.
    More packets than coordinates surfaces as ProgressionExhaustedError from next();
    fewer packets than coordinates is a ValueError.
    """
    pairs: List[Tuple[ProgressionData, T]] = []
    for packet in packets:
        pairs.append((it.next(), packet))
    if it.has_next():
        raise ValueError(f"ran out of packets after {len(pairs)}, progression has more coordinates")
    return pairs


def same_packets(a: Sequence[ProgressionData], b: Sequence[ProgressionData]) -> bool:
    """Same multiset of coordinates, ignoring order."""
    return sorted(p.as_tuple() for p in a) == sorted(p.as_tuple() for p in b)
