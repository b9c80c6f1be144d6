from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG, ReferenceConfig, resolve_config
from .labels import EMPTY_ADDRESS, Address, RawLabel
from .types import ERROR_TYPE, SCALAR_TYPE, TensorType
from .exceptions import TypeSpecError

logger = logging.getLogger(__name__)

DEFAULT_REL_TOL = DEFAULT_CONFIG.rel_tol

AddressLike = Union[Address, Mapping[str, RawLabel]]


def approx_equal(a: float, b: float, rel_tol: float = DEFAULT_REL_TOL) -> bool:
    """Float comparison used when checking results across engines."""
    if math.isnan(a) and math.isnan(b):
        return True
    if a == b:
        return True
    if math.isinf(a) or math.isinf(b):
        return False
    return abs(a - b) <= rel_tol * max(abs(a), abs(b))


def _as_address(address: AddressLike) -> Address:
    if isinstance(address, Address):
        return address
    return Address.of(address)


class TensorValue:
    """
    Immutable tensor value: a type plus a set of cells keyed by address.

    Values are built once and never change afterwards. ``cells`` is exposed as a
    read-only mapping from :class:`Address` to ``float``. A value whose type is
    the error type carries no cells and signals that the operation producing it
    was given a malformed request.
    """

    __slots__ = ("_type", "_cells")

    def __init__(self, tensor_type: TensorType, cells: Optional[Mapping[Address, float]] = None):
        # trusted constructor; operations hand over dicts they built themselves
        self._type = tensor_type
        owned: Dict[Address, float] = {} if tensor_type.is_error else dict(cells or {})
        self._cells = MappingProxyType(owned)

    @classmethod
    def build(
        cls,
        tensor_type: TensorType,
        cells: Union[Mapping[Address, float], Iterable[Tuple[AddressLike, float]]] = (),
    ) -> "TensorValue":
        """Validate raw cells against ``tensor_type``.

        Returns an error-typed value if any address names unknown dimensions,
        misses a dimension, or carries a label of the wrong kind. A repeated
        address keeps its last value.
        """
        if tensor_type.is_error:
            return error_value()
        pairs = cells.items() if isinstance(cells, Mapping) else cells
        owned: Dict[Address, float] = {}
        for raw_address, value in pairs:
            try:
                address = _as_address(raw_address)
            except TypeSpecError as exc:
                logger.debug("build: rejected address %r: %s", raw_address, exc)
                return error_value()
            if not address.valid_for(tensor_type):
                logger.debug("build: address %r is not valid for %s", address, tensor_type.to_spec())
                return error_value()
            owned[address] = float(np.float64(value))
        return cls(tensor_type, owned)

    @classmethod
    def scalar(cls, value: Optional[float] = None) -> "TensorValue":
        if value is None:
            return cls(SCALAR_TYPE)
        return cls(SCALAR_TYPE, {EMPTY_ADDRESS: float(value)})

    @property
    def type(self) -> TensorType:
        return self._type

    @property
    def cells(self) -> Mapping[Address, float]:
        return self._cells

    @property
    def is_error(self) -> bool:
        return self._type.is_error

    def get(self, address: AddressLike, default: Optional[float] = None) -> Optional[float]:
        return self._cells.get(_as_address(address), default)

    def items(self) -> Iterator[Tuple[Address, float]]:
        return iter(self._cells.items())

    def sorted_cells(self) -> Tuple[Tuple[Address, float], ...]:
        return tuple(sorted(self._cells.items(), key=lambda kv: kv[0].sort_key()))

    def sum(self) -> float:
        total = 0.0
        for value in self._cells.values():
            total += value
        return total

    def approx_equal(
        self,
        other: "TensorValue",
        rel_tol: Optional[float] = None,
        *,
        config: Optional[ReferenceConfig] = None,
    ) -> bool:
        """Compare types, address sets and cell values.

        An explicit ``rel_tol`` wins over ``config.rel_tol``; ``==`` uses the
        default configuration.
        """
        if rel_tol is None:
            rel_tol = resolve_config(config).rel_tol
        if self._type != other._type:
            return False
        if self._cells.keys() != other._cells.keys():
            return False
        return all(approx_equal(value, other._cells[address], rel_tol) for address, value in self._cells.items())

    def to_spec(self) -> str:
        lines = [self._type.to_spec()]
        for address, value in self.sorted_cells():
            lines.append(f"  {address!r}: {value!r}")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TensorValue):
            return NotImplemented
        return self.approx_equal(other)

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"TensorValue({self._type.to_spec()}, cells={len(self._cells)})"

    def __str__(self) -> str:
        return self.to_spec()


def error_value() -> TensorValue:
    return TensorValue(ERROR_TYPE)
