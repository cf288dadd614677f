from __future__ import annotations
import argparse
import logging
import sys
import numpy as np

from j2kprog.orders import ProgressionOrder, make_progression_iterator, UnsupportedProgressionOrderError
from j2kprog.packets import packet_count, progression_array
from j2kprog.progression import PrecinctCount
from j2kprog.precincts import (
    constant_precinct_count,
    max_decomposition_levels,
    parse_size,
    precinct_count_from_components,
    preset_maximal_precincts,
    preset_uniform_precincts,
    uniform_components,
)


def _parse_levels(text: str) -> list[int]:
    try:
        levels = [int(v) for v in text.split(",") if v.strip()]
    except ValueError:
        raise ValueError(f"component levels must be comma separated integers, got {text!r}") from None
    if not levels or any(v < 0 for v in levels):
        raise ValueError(f"component levels must be non-negative, got {text!r}")
    return levels


def _tile_parameters(args) -> tuple[int, int, PrecinctCount]:
    """
    Returns (max_decomposition_levels, component_count, precinct_count).
    Geometry mode (--component-size) derives precinct counts from B.6;
    otherwise every (r, i) gets --precincts precincts.
    """
    if args.component_size is None:
        return args.levels, args.components, constant_precinct_count(args.precincts)

    h, w = parse_size(args.component_size)
    if args.component_levels:
        levels = _parse_levels(args.component_levels)
    else:
        levels = [args.levels] * args.components
    nmax = max(levels)
    if args.precinct_exp is None:
        sizes = preset_maximal_precincts(nmax)
    else:
        ppy, ppx = parse_size(args.precinct_exp)
        sizes = preset_uniform_precincts(nmax, ppx, ppy)
    components = uniform_components(h, w, levels, sizes)
    return max_decomposition_levels(components), len(components), precinct_count_from_components(components)


def main():
    ap = argparse.ArgumentParser(description="JPEG 2000 packet progression: enumerate (layer, resolution, component, precinct)")
    ap.add_argument("--order", default="LRCP", choices=[o.name for o in ProgressionOrder],
                    help="Progression order (default: LRCP)")
    ap.add_argument("--layers", type=int, default=1, help="Number of quality layers (default: 1)")
    ap.add_argument("--levels", type=int, default=3, help="Max decomposition levels Nmax (default: 3)")
    ap.add_argument("--components", type=int, default=1, help="Number of components (default: 1)")
    ap.add_argument("--precincts", type=int, default=1, help="Precincts per (r, i) when no geometry is given (default: 1)")
    ap.add_argument("--component-size", default=None, help="Tile-component size HxW; enables precinct geometry")
    ap.add_argument("--component-levels", default=None, help="Per-component decomposition levels, e.g. 3,3,2")
    ap.add_argument("--precinct-exp", default=None, help="Precinct exponents PPyxPPx (default: 15x15)")
    ap.add_argument("--save-npy", default=None, help="Optional path to save the (N,4) coordinate array")
    ap.add_argument("--quiet", action="store_true", help="Only print the total")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if min(args.layers, args.levels, args.components, args.precincts) < 0:
        print("Counts must be non-negative", file=sys.stderr)
        sys.exit(2)

    try:
        nmax, ncomp, precinct_count = _tile_parameters(args)
        it = make_progression_iterator(args.order, args.layers, nmax, ncomp, precinct_count)
    except (ValueError, UnsupportedProgressionOrderError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"[Tile] order={args.order} layers={args.layers} Nmax={nmax} components={ncomp}")
    coords = progression_array(it)
    if not args.quiet:
        for l, r, c, p in coords:
            print(f"[{args.order}] l={l} r={r} c={c} p={p}")

    expected = packet_count(args.layers, nmax, ncomp, precinct_count)
    print(f"[Total] packets={len(coords)}  (expected={expected})")

    if args.save_npy:
        np.save(args.save_npy, coords)
        print(f"[Saved] coordinates -> {args.save_npy}")


if __name__ == "__main__":
    main()
