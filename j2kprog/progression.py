# Packet progression iterators (T.800 Annex B.12.1)
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)

# (resolution_level, component) -> number of precincts
PrecinctCount = Callable[[int, int], int]


class ProgressionExhaustedError(RuntimeError):
    """next() was called on an iterator that has no coordinates left."""


@dataclass(frozen=True)
class ProgressionData:
    """Logical address of one packet within a tile."""
    layer: int
    resolution_level: int
    component: int
    precinct: int

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.layer, self.resolution_level, self.component, self.precinct)


@dataclass
class _Counter:
    # mutable twin of ProgressionData, used for odometer state and bounds
    layer: int = 0
    resolution_level: int = 0
    component: int = 0
    precinct: int = 0

    def freeze(self) -> ProgressionData:
        return ProgressionData(self.layer, self.resolution_level, self.component, self.precinct)


class ProgressionIterator:
    """
    Shared protocol for packet progression orders:
      has_next() -> bool             (idempotent, no side effects)
      next()     -> ProgressionData  (raises ProgressionExhaustedError when exhausted)
    Instances also work as plain Python iterators.
    """
    order_name = "?"

    def has_next(self) -> bool:
        raise NotImplementedError

    def next(self) -> ProgressionData:
        raise NotImplementedError

    def _exhausted(self) -> ProgressionExhaustedError:
        return ProgressionExhaustedError(f"{self.order_name} progression has no packets left")

    def __iter__(self) -> Iterator[ProgressionData]:
        return self

    def __next__(self) -> ProgressionData:
        if not self.has_next():
            raise StopIteration
        return self.next()


class LayerResolutionComponentPositionIterator(ProgressionIterator):
    """
    LRCP (B.12.1.1):
      for l in 0..L-1
        for r in 0..Nmax
          for i in 0..Csiz-1
            for k in 0..numprecincts(r, i)-1
    r always runs up to the tile-wide Nmax, also for components with fewer
    decomposition levels; precinct_count must return 0 for those (r, i).
    """
    order_name = "LRCP"

    def __init__(self, layer_count: int, max_decomposition_levels: int, component_count: int,
                 precinct_count: PrecinctCount):
        self.layer_count = layer_count
        self.max_decomposition_levels = max_decomposition_levels
        self.component_count = component_count
        self._precinct_count = precinct_count
        self._generator = self._generate()
        # first value is fetched eagerly so has_next() is valid right away
        self._pending: Optional[ProgressionData] = next(self._generator, None)
        logger.debug("LRCP iterator: L=%d Nmax=%d C=%d empty=%s",
                     layer_count, max_decomposition_levels, component_count, self._pending is None)

    def _generate(self) -> Iterator[ProgressionData]:
        for l in range(self.layer_count):
            for r in range(self.max_decomposition_levels + 1):
                for i in range(self.component_count):
                    for k in range(self._precinct_count(r, i)):
                        yield ProgressionData(l, r, i, k)

    def has_next(self) -> bool:
        return self._pending is not None

    def next(self) -> ProgressionData:
        if self._pending is None:
            raise self._exhausted()
        result = self._pending
        self._pending = next(self._generator, None)
        return result


class ResolutionLayerComponentPositionIterator(ProgressionIterator):
    """
    RLCP (B.12.1.2):
      for r in 0..Nmax
        for l in 0..L-1
          for i in 0..Csiz-1
            for k in 0..numprecincts(r, i)-1

    Mixed-radix odometer. The precinct bound depends on (r, i), so it is
    refreshed every time component, layer or resolution level moves.
    Terminal state is (layer=0, r=Nmax+1, component=0, precinct=0); r only
    moves after the three inner counters wrap, so it cannot be hit early.
    """
    order_name = "RLCP"

    def __init__(self, layer_count: int, max_decomposition_levels: int, component_count: int,
                 precinct_count: PrecinctCount):
        self._precinct_count = precinct_count
        self._next = _Counter()
        self._end = _Counter(
            layer=layer_count,
            resolution_level=max_decomposition_levels + 1,
            component=component_count,
        )
        if layer_count <= 0 or component_count <= 0:
            # nothing to enumerate: park on the terminal state
            self._next.resolution_level = self._end.resolution_level
        else:
            self._end.precinct = precinct_count(0, 0)
            self._skip_empty()
        logger.debug("RLCP iterator: L=%d Nmax=%d C=%d empty=%s",
                     layer_count, max_decomposition_levels, component_count, not self.has_next())

    def _terminal(self) -> tuple[int, int, int, int]:
        return (0, self._end.resolution_level, 0, 0)

    def has_next(self) -> bool:
        n = self._next
        return (n.layer, n.resolution_level, n.component, n.precinct) != self._terminal()

    def _advance(self) -> None:
        n, end = self._next, self._end

        n.precinct += 1
        if n.precinct < end.precinct:
            return

        n.precinct = 0
        n.component += 1
        if n.component < end.component:
            end.precinct = self._precinct_count(n.resolution_level, n.component)
            return

        n.component = 0
        n.layer += 1
        if n.layer < end.layer:
            end.precinct = self._precinct_count(n.resolution_level, n.component)
            return

        n.layer = 0
        n.resolution_level += 1
        if self.has_next():
            end.precinct = self._precinct_count(n.resolution_level, n.component)
        assert n.resolution_level < end.resolution_level or not self.has_next()

    def _skip_empty(self) -> None:
        # (r, i) pairs without precincts contribute no packets
        while self.has_next() and self._next.precinct >= self._end.precinct:
            self._advance()

    def next(self) -> ProgressionData:
        if not self.has_next():
            raise self._exhausted()
        current = self._next.freeze()
        self._advance()
        self._skip_empty()
        return current
