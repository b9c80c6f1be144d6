"""
Reference implementations of the eight tensor operations.

Each operation is a plain function from input values to a brand new
:class:`~tensorref.core.value.TensorValue`. Nothing here is vectorized: cells
are visited one by one with nested loops so the semantics can be read straight
off the code. Malformed requests yield an error-typed value (see
:func:`~tensorref.core.value.error_value`), and every operation passes an
error-typed input straight through.
"""

from __future__ import annotations

import logging
import numbers
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .aggr import Aggr, Aggregator
from .config import ReferenceConfig, resolve_config
from .exceptions import TypeSpecError
from .labels import Address, Index, Label, Name, RawLabel, as_label, label_fits
from .resolve import child_scalar, resolve_label
from .types import Dimension, Indexed, TensorType, merge_dimensions
from .value import TensorValue, error_value

logger = logging.getLogger(__name__)

UnaryFn = Callable[[float], float]
BinaryFn = Callable[[float, float], float]

CreateSpec = Mapping[Union[Address, Tuple[Tuple[str, RawLabel], ...]], int]
# Label/Index/Name or raw str means a verbatim label; an integer indexes ``children``.
PeekSpec = Mapping[str, Union[Index, Name, str, int]]


def _fail(op: str, reason: str, *args) -> TensorValue:
    logger.debug("%s: " + reason, op, *args)
    return error_value()


def _any_error(*values: TensorValue) -> bool:
    return any(value.is_error for value in values)


def _is_child_index(entry: object) -> bool:
    return isinstance(entry, numbers.Integral) and not isinstance(entry, bool)


# ---------------------------------------------------------------------------
# concat


def _concat_size(tensor_type: TensorType, dimension: str) -> int:
    dim = tensor_type.dimension(dimension)
    if dim is not None and isinstance(dim.kind, Indexed):
        return dim.kind.size
    return 1


def _broadcast_labels(
    cell: Address,
    other: TensorValue,
    shared: Sequence[str],
    exclusive: Sequence[str],
) -> List[Address]:
    """Labels for ``other``'s exclusive dimensions that ``cell`` must be spread over."""
    if not exclusive:
        return [Address()]
    seen: Dict[Address, None] = {}
    for other_address in other.cells:
        if cell.agrees_with(other_address, shared):
            seen.setdefault(other_address.keep(exclusive), None)
    return list(seen)


def concat(a: TensorValue, b: TensorValue, dimension: str) -> TensorValue:
    """Concatenate ``a`` and ``b`` along the indexed ``dimension``.

    A side that lacks ``dimension`` counts as size 1 along it. Cells of ``b``
    are shifted by the size of ``a``. When one side lacks another dimension
    that the other side has, its cells are repeated for each label the other
    side carries there (restricted to cells that agree on shared dimensions).
    """
    if _any_error(a, b):
        return _fail("concat", "error-typed input")
    for side in (a, b):
        dim = side.type.dimension(dimension)
        if dim is not None and dim.is_mapped:
            return _fail("concat", "dimension '%s' is mapped", dimension)
    a_rest = [dim for dim in a.type if dim.name != dimension]
    b_rest = [dim for dim in b.type if dim.name != dimension]
    merged, conflicts = merge_dimensions(a_rest, b_rest)
    if conflicts:
        return _fail("concat", "incompatible dimensions %s", conflicts)
    size_a = _concat_size(a.type, dimension)
    size_b = _concat_size(b.type, dimension)
    result_type = TensorType(merged + [Dimension.indexed(dimension, size_a + size_b)])

    a_names = {dim.name for dim in a_rest}
    b_names = {dim.name for dim in b_rest}
    shared = sorted(a_names & b_names)
    only_a = sorted(a_names - b_names)
    only_b = sorted(b_names - a_names)

    cells: Dict[Address, float] = {}
    for address, value in a.cells.items():
        offset = address.get(dimension)
        index = offset.value if isinstance(offset, Index) else 0
        base = address.project([dimension])
        for extra in _broadcast_labels(base, b, shared, only_b):
            cells[base.extend(extra).extend({dimension: Index(index)})] = value
    for address, value in b.cells.items():
        offset = address.get(dimension)
        index = (offset.value if isinstance(offset, Index) else 0) + size_a
        base = address.project([dimension])
        for extra in _broadcast_labels(base, a, shared, only_a):
            cells[base.extend(extra).extend({dimension: Index(index)})] = value
    return TensorValue(result_type, cells)


# ---------------------------------------------------------------------------
# create


def create(
    result_type: TensorType,
    spec: CreateSpec,
    children: Sequence[TensorValue],
) -> TensorValue:
    """Build a tensor whose cells are the summed values of selected children.

    ``spec`` maps each output address to an index into ``children``; addresses
    not listed produce no cell.
    """
    if result_type.is_error:
        return _fail("create", "error result type")
    cells: Dict[Address, float] = {}
    for raw_address, child_idx in spec.items():
        try:
            address = raw_address if isinstance(raw_address, Address) else Address(raw_address)
        except TypeSpecError as exc:
            return _fail("create", "malformed address %r: %s", raw_address, exc)
        if not address.valid_for(result_type):
            return _fail("create", "address %r not valid for %s", address, result_type.to_spec())
        if not _is_child_index(child_idx):
            return _fail("create", "child index %r is not an integer", child_idx)
        if not 0 <= child_idx < len(children):
            return _fail("create", "child index %s out of range", child_idx)
        child = children[int(child_idx)]
        if child.is_error:
            return _fail("create", "child %s is error-typed", child_idx)
        cells[address] = child_scalar(child)
    return TensorValue(result_type, cells)


# ---------------------------------------------------------------------------
# join


def join(a: TensorValue, b: TensorValue, fn: BinaryFn) -> TensorValue:
    """Combine every pair of cells that agree on all shared dimensions."""
    if _any_error(a, b):
        return _fail("join", "error-typed input")
    merged, conflicts = merge_dimensions(a.type, b.type)
    if conflicts:
        return _fail("join", "incompatible dimensions %s", conflicts)
    result_type = TensorType(merged)
    shared = [name for name in a.type.names if b.type.has_dimension(name)]
    cells: Dict[Address, float] = {}
    for addr_a, value_a in a.cells.items():
        for addr_b, value_b in b.cells.items():
            if not addr_a.agrees_with(addr_b, shared):
                continue
            address = addr_a.extend(addr_b.project(shared))
            cells[address] = fn(value_a, value_b)
    return TensorValue(result_type, cells)


# ---------------------------------------------------------------------------
# map / merge


def map(input: TensorValue, fn: UnaryFn) -> TensorValue:  # noqa: A001
    if input.is_error:
        return _fail("map", "error-typed input")
    return TensorValue(input.type, {address: fn(value) for address, value in input.cells.items()})


def merge(a: TensorValue, b: TensorValue, fn: BinaryFn) -> TensorValue:
    """Union of both address sets; ``fn`` resolves addresses present in both."""
    if _any_error(a, b):
        return _fail("merge", "error-typed input")
    if a.type != b.type:
        return _fail("merge", "type mismatch %s vs %s", a.type.to_spec(), b.type.to_spec())
    cells: Dict[Address, float] = dict(a.cells)
    for address, value in b.cells.items():
        if address in cells:
            cells[address] = fn(cells[address], value)
        else:
            cells[address] = value
    return TensorValue(a.type, cells)


# ---------------------------------------------------------------------------
# peek


_NO_MATCH = object()


def _peek_label(
    dim: Dimension,
    entry: Union[Index, Name, str, int],
    children: Sequence[TensorValue],
    config: ReferenceConfig,
):
    """Resolve one peek entry; returns a Label, ``_NO_MATCH`` or ``None`` on error."""
    if isinstance(entry, bool):
        logger.debug("peek: boolean entry for '%s'", dim.name)
        return None
    if _is_child_index(entry):
        if not 0 <= entry < len(children):
            logger.debug("peek: child index %s out of range", entry)
            return None
        child = children[int(entry)]
        if child.is_error:
            logger.debug("peek: child %s is error-typed", entry)
            return None
        label = resolve_label(dim, child_scalar(child), config)
        return _NO_MATCH if label is None else label
    label = as_label(entry)
    if isinstance(dim.kind, Indexed) != isinstance(label, Index):
        logger.debug("peek: label %r has the wrong kind for '%s'", label, dim.name)
        return None
    if not label_fits(dim, label):
        return _NO_MATCH
    return label


def peek(
    input: TensorValue,
    spec: PeekSpec,
    children: Sequence[TensorValue] = (),
    *,
    config: Optional[ReferenceConfig] = None,
) -> TensorValue:
    """Fix some dimensions of ``input`` to single labels and drop them.

    A label that matches no cell (including an index outside the dimension)
    gives an empty tensor of the reduced type, not an error.
    """
    if input.is_error:
        return _fail("peek", "error-typed input")
    cfg = resolve_config(config)
    fixed: Dict[str, Label] = {}
    matches_nothing = False
    for name, entry in spec.items():
        dim = input.type.dimension(name)
        if dim is None:
            return _fail("peek", "unknown dimension '%s'", name)
        label = _peek_label(dim, entry, children, cfg)
        if label is None:
            return error_value()
        if label is _NO_MATCH:
            matches_nothing = True
        else:
            fixed[name] = label
    result_type = input.type.without(spec.keys())
    if matches_nothing:
        return TensorValue(result_type)
    cells: Dict[Address, float] = {}
    for address, value in input.cells.items():
        if all(address.get(name) == label for name, label in fixed.items()):
            cells[address.project(fixed)] = value
    return TensorValue(result_type, cells)


# ---------------------------------------------------------------------------
# reduce


def reduce(input: TensorValue, dimensions: Sequence[str], aggregator: Aggr) -> TensorValue:
    """Aggregate away ``dimensions`` (all of them when the list is empty)."""
    if input.is_error:
        return _fail("reduce", "error-typed input")
    for name in dimensions:
        if not input.type.has_dimension(name):
            return _fail("reduce", "unknown dimension '%s'", name)
    drop = list(dimensions) if dimensions else list(input.type.names)
    result_type = input.type.without(drop)
    groups: Dict[Address, Aggregator] = {}
    for address, value in input.cells.items():
        key = address.project(drop)
        group = groups.get(key)
        if group is None:
            group = aggregator.create()
            group.first(value)
            groups[key] = group
        else:
            group.next(value)
    return TensorValue(result_type, {key: group.result() for key, group in groups.items()})


# ---------------------------------------------------------------------------
# rename


def rename(input: TensorValue, from_names: Sequence[str], to_names: Sequence[str]) -> TensorValue:
    """Rename dimensions positionally; the result type is in name order."""
    if input.is_error:
        return _fail("rename", "error-typed input")
    if not from_names or len(from_names) != len(to_names):
        return _fail("rename", "expected two non-empty lists of equal length")
    if len(set(from_names)) != len(from_names) or len(set(to_names)) != len(to_names):
        return _fail("rename", "duplicate names in %s -> %s", list(from_names), list(to_names))
    mapping = dict(zip(from_names, to_names))
    for name in from_names:
        if not input.type.has_dimension(name):
            return _fail("rename", "unknown dimension '%s'", name)
    untouched = set(input.type.names) - set(from_names)
    clashes = sorted(untouched & set(to_names))
    if clashes:
        return _fail("rename", "new names %s collide with existing dimensions", clashes)
    result_type = TensorType(dim.renamed(mapping.get(dim.name, dim.name)) for dim in input.type)
    return TensorValue(
        result_type,
        {address.rename(mapping): value for address, value in input.cells.items()},
    )
