# Progression order codes (COD / POC marker, Table A.16)
from __future__ import annotations
import logging
from enum import IntEnum
from typing import Dict, Type

from .progression import (
    LayerResolutionComponentPositionIterator,
    PrecinctCount,
    ProgressionIterator,
    ResolutionLayerComponentPositionIterator,
)

logger = logging.getLogger(__name__)


class UnsupportedProgressionOrderError(NotImplementedError):
    pass


class ProgressionOrder(IntEnum):
    LRCP = 0
    RLCP = 1
    RPCL = 2
    PCRL = 3
    CPRL = 4

    @classmethod
    def from_name(cls, name: str) -> "ProgressionOrder":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown progression order: {name!r}") from None


_ITERATORS: Dict[ProgressionOrder, Type[ProgressionIterator]] = {
    ProgressionOrder.LRCP: LayerResolutionComponentPositionIterator,
    ProgressionOrder.RLCP: ResolutionLayerComponentPositionIterator,
}


def supported_orders() -> list[ProgressionOrder]:
    return list(_ITERATORS)


def make_progression_iterator(order: ProgressionOrder | int | str, layer_count: int,
                              max_decomposition_levels: int, component_count: int,
                              precinct_count: PrecinctCount) -> ProgressionIterator:
    """
    Build the iterator for a progression order given as enum, marker code
    (0..4) or name ("LRCP", "rlcp", ...).
    """
    if isinstance(order, str):
        order = ProgressionOrder.from_name(order)
    else:
        order = ProgressionOrder(order)

    cls = _ITERATORS.get(order)
    if cls is None:
        logger.debug("No iterator for progression order %s", order.name)
        raise UnsupportedProgressionOrderError(f"Progression order {order.name} is not supported")
    return cls(layer_count, max_decomposition_levels, component_count, precinct_count)
