from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .core.config import ReferenceConfig, resolve_config
from .core.exceptions import TypeSpecError
from .core.labels import Address, Index
from .core.types import Dimension, TensorType
from .core.value import TensorValue


def from_numpy(array: Any, names: Sequence[str]) -> TensorValue:
    """Wrap a dense array as a tensor value with one cell per array position.

    ``names`` labels the array axes in order; the resulting type lists them in
    ascending name order like every other tensor type.
    """
    arr = np.asarray(array, dtype=np.float64)
    if arr.ndim != len(names):
        raise TypeSpecError(f"Array of rank {arr.ndim} needs {arr.ndim} dimension names, got {len(names)}")
    tensor_type = TensorType(Dimension.indexed(name, int(size)) for name, size in zip(names, arr.shape))
    cells: Dict[Address, float] = {}
    for position in np.ndindex(*arr.shape):
        address = Address((name, Index(int(pos))) for name, pos in zip(names, position))
        cells[address] = float(arr[position])
    return TensorValue(tensor_type, cells)


def to_numpy(value: TensorValue, *, fill_value: float = 0.0) -> NDArray[np.float64]:
    """Materialize a dense (or scalar) tensor value as a float64 array.

    Axes follow the type's name order. Positions without a cell are set to
    ``fill_value``.
    """
    if value.is_error:
        raise TypeSpecError("Cannot convert an error-typed value to an array")
    if not value.type.is_dense:
        raise TypeSpecError(f"Only dense tensors convert to arrays, got {value.type.to_spec()}")
    shape = tuple(dim.size for dim in value.type)
    arr = np.full(shape, fill_value, dtype=np.float64)
    for address, cell in value.cells.items():
        position = tuple(label.value for _, label in address.items())
        arr[position] = cell
    return arr


def assert_matches_reference(
    actual: Any,
    reference: TensorValue,
    *,
    rtol: Optional[float] = None,
    atol: float = 0.0,
    fill_value: float = 0.0,
    config: Optional[ReferenceConfig] = None,
) -> None:
    """Raise ``AssertionError`` when a backend's dense output differs from the oracle.

    ``rtol`` defaults to the relative tolerance of ``config``.
    """
    if rtol is None:
        rtol = resolve_config(config).rel_tol
    expected = to_numpy(reference, fill_value=fill_value)
    np.testing.assert_allclose(np.asarray(actual, dtype=np.float64), expected, rtol=rtol, atol=atol, equal_nan=True)
