# Precinct geometry (T.800 B.5 / B.6) and precinct-count callbacks
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple
import numpy as np

from .progression import PrecinctCount

# Precinct exponent table: resolution level -> (PPx, PPy)
PrecinctSizes = Dict[int, Tuple[int, int]]

MAX_PRECINCT_EXPONENT = 15


# Presets
def preset_maximal_precincts(levels: int) -> PrecinctSizes:
    # no precinct partition signalled: PPx = PPy = 15 everywhere
    return {r: (MAX_PRECINCT_EXPONENT, MAX_PRECINCT_EXPONENT) for r in range(levels + 1)}


def preset_uniform_precincts(levels: int, ppx: int, ppy: int) -> PrecinctSizes:
    if ppx < 0 or ppy < 0:
        raise ValueError("precinct exponents must be non-negative")
    return {r: (ppx, ppy) for r in range(levels + 1)}


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


@dataclass(frozen=True)
class ResolutionRect:
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def w(self) -> int:
        return self.x1 - self.x0

    @property
    def h(self) -> int:
        return self.y1 - self.y0


@dataclass(frozen=True)
class TileComponent:
    """
    Tile-component rectangle [x0, x1) x [y0, y1) on the reference grid of its component.
    precinct_sizes accepts a PrecinctSizes dict and is stored as sorted
    (r, (PPx, PPy)) pairs so the component stays hashable.
    """
    x0: int
    y0: int
    x1: int
    y1: int
    decomposition_levels: int
    precinct_sizes: Tuple[Tuple[int, Tuple[int, int]], ...] = ()

    def __post_init__(self):
        sizes = self.precinct_sizes
        items = sizes.items() if isinstance(sizes, dict) else sizes
        object.__setattr__(self, "precinct_sizes",
                           tuple(sorted((int(r), (int(px), int(py))) for r, (px, py) in items)))

    def precinct_exponents(self, r: int) -> Tuple[int, int]:
        for level, exponents in self.precinct_sizes:
            if level == r:
                return exponents
        return (MAX_PRECINCT_EXPONENT, MAX_PRECINCT_EXPONENT)


def resolution_rect(tc: TileComponent, r: int) -> ResolutionRect:
    """(trx0, try0, trx1, try1) of resolution level r, eq. B-14."""
    if r < 0 or r > tc.decomposition_levels:
        raise ValueError(f"resolution level {r} outside 0..{tc.decomposition_levels}")
    scale = 1 << (tc.decomposition_levels - r)
    return ResolutionRect(
        _ceil_div(tc.x0, scale),
        _ceil_div(tc.y0, scale),
        _ceil_div(tc.x1, scale),
        _ceil_div(tc.y1, scale),
    )


def _precincts_along(lo: int, hi: int, exponent: int) -> int:
    # eq. B-16; an empty resolution has no precincts at all
    if hi <= lo:
        return 0
    size = 1 << exponent
    return _ceil_div(hi, size) - lo // size


def precinct_grid(tc: TileComponent, r: int) -> Tuple[int, int]:
    """(numprecincts_wide, numprecincts_high) for resolution level r of one tile-component."""
    if r < 0 or r > tc.decomposition_levels:
        return (0, 0)
    ppx, ppy = tc.precinct_exponents(r)
    if ppx < 0 or ppy < 0:
        raise ValueError(f"negative precinct exponent at resolution {r}: {(ppx, ppy)}")
    rect = resolution_rect(tc, r)
    return _precincts_along(rect.x0, rect.x1, ppx), _precincts_along(rect.y0, rect.y1, ppy)


def number_of_precincts(tc: TileComponent, r: int) -> int:
    wide, high = precinct_grid(tc, r)
    return wide * high


def max_decomposition_levels(components: Iterable[TileComponent]) -> int:
    return max((tc.decomposition_levels for tc in components), default=0)


def precinct_table(components: Sequence[TileComponent], max_levels: int | None = None) -> np.ndarray:
    """
    Table T[r, i] = numprecincts of resolution r in component i, for r in 0..max_levels.
    Rows past a component's own decomposition levels are 0.
    """
    if max_levels is None:
        max_levels = max_decomposition_levels(components)
    table = np.zeros((max_levels + 1, len(components)), dtype=np.int64)
    for i, tc in enumerate(components):
        for r in range(min(tc.decomposition_levels, max_levels) + 1):
            table[r, i] = number_of_precincts(tc, r)
    return table


def precinct_count_from_table(table: np.ndarray) -> PrecinctCount:
    """Callback over a (levels+1, components) table; out-of-range lookups give 0."""
    table = np.asarray(table)
    if table.ndim != 2:
        raise ValueError(f"precinct table must be 2-D, got shape {table.shape}")
    rows, cols = table.shape

    def count(resolution_level: int, component: int) -> int:
        if 0 <= resolution_level < rows and 0 <= component < cols:
            return int(table[resolution_level, component])
        return 0
    return count


def precinct_count_from_components(components: Sequence[TileComponent]) -> PrecinctCount:
    return precinct_count_from_table(precinct_table(components))


def constant_precinct_count(n: int) -> PrecinctCount:
    def count(resolution_level: int, component: int) -> int:
        return n
    return count


def parse_size(text: str) -> Tuple[int, int]:
    """'HxW' -> (h, w), as used by the CLI."""
    try:
        h, w = map(int, text.lower().split("x"))
    except ValueError:
        raise ValueError(f"size must look like HxW, got {text!r}") from None
    if h < 0 or w < 0:
        raise ValueError(f"size must be non-negative, got {text!r}")
    return h, w


def uniform_components(h: int, w: int, levels: List[int],
                       precinct_sizes: PrecinctSizes | None = None) -> List[TileComponent]:
    """Components anchored at the origin, all h x w, with per-component decomposition levels."""
    return [
        TileComponent(0, 0, w, h, nl, dict(precinct_sizes or {}))
        for nl in levels
    ]
