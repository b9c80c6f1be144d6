from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import TypeSpecError


@dataclass(frozen=True)
class Indexed:
    size: int

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise TypeSpecError(f"Indexed dimension size must be a positive integer, got {self.size!r}")


@dataclass(frozen=True)
class Mapped:
    pass


DimensionKind = Union[Indexed, Mapped]


@dataclass(frozen=True)
class Dimension:
    name: str
    kind: DimensionKind

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeSpecError(f"Dimension name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.kind, (Indexed, Mapped)):
            raise TypeSpecError("Dimension kind must be Indexed or Mapped", dimension=self.name)

    @classmethod
    def indexed(cls, name: str, size: int) -> "Dimension":
        return cls(name, Indexed(size))

    @classmethod
    def mapped(cls, name: str) -> "Dimension":
        return cls(name, Mapped())

    @property
    def is_indexed(self) -> bool:
        return isinstance(self.kind, Indexed)

    @property
    def is_mapped(self) -> bool:
        return isinstance(self.kind, Mapped)

    @property
    def size(self) -> Optional[int]:
        if isinstance(self.kind, Indexed):
            return self.kind.size
        return None

    def renamed(self, name: str) -> "Dimension":
        return Dimension(name, self.kind)

    def to_spec(self) -> str:
        if isinstance(self.kind, Indexed):
            return f"{self.name}[{self.kind.size}]"
        return f"{self.name}{{}}"


def compatible(a: Dimension, b: Dimension) -> bool:
    """Same-named dimensions are compatible when their kinds (and sizes) agree."""
    return a.kind == b.kind


def merge_dimensions(
    a: Iterable[Dimension],
    b: Iterable[Dimension],
) -> Tuple[List[Dimension], List[str]]:
    """Union two dimension lists by name.

    Returns the merged dimensions in ascending name order together with the
    names whose kinds disagree. Conflicting names keep the left-hand kind;
    callers decide whether a conflict is fatal.
    """
    merged: Dict[str, Dimension] = {dim.name: dim for dim in a}
    conflicts: List[str] = []
    for dim in b:
        existing = merged.get(dim.name)
        if existing is None:
            merged[dim.name] = dim
        elif not compatible(existing, dim):
            conflicts.append(dim.name)
    return [merged[name] for name in sorted(merged)], sorted(conflicts)


class TensorType:
    """Ordered-by-name set of dimensions, the scalar type, or the error type."""

    __slots__ = ("_dimensions", "_is_error", "_by_name")

    def __init__(self, dimensions: Iterable[Dimension] = (), *, _error: bool = False):
        dims = list(dimensions)
        for dim in dims:
            if not isinstance(dim, Dimension):
                raise TypeSpecError(f"Expected Dimension, got {type(dim).__name__}")
        dims.sort(key=lambda dim: dim.name)
        by_name: Dict[str, Dimension] = {}
        for dim in dims:
            if dim.name in by_name:
                raise TypeSpecError("Duplicate dimension name", dimension=dim.name)
            by_name[dim.name] = dim
        self._dimensions: Tuple[Dimension, ...] = tuple(dims)
        self._by_name = by_name
        self._is_error = bool(_error)

    @classmethod
    def of(cls, *dimensions: Dimension) -> "TensorType":
        return cls(dimensions)

    @classmethod
    def scalar(cls) -> "TensorType":
        return cls(())

    @classmethod
    def error(cls) -> "TensorType":
        return cls((), _error=True)

    @property
    def dimensions(self) -> Tuple[Dimension, ...]:
        return self._dimensions

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(dim.name for dim in self._dimensions)

    @property
    def is_error(self) -> bool:
        return self._is_error

    @property
    def is_scalar(self) -> bool:
        return not self._is_error and not self._dimensions

    @property
    def is_dense(self) -> bool:
        return not self._is_error and all(dim.is_indexed for dim in self._dimensions)

    @property
    def is_sparse(self) -> bool:
        return not self._is_error and all(dim.is_mapped for dim in self._dimensions)

    @property
    def is_mixed(self) -> bool:
        return (
            not self._is_error
            and any(dim.is_indexed for dim in self._dimensions)
            and any(dim.is_mapped for dim in self._dimensions)
        )

    def has_dimension(self, name: str) -> bool:
        return name in self._by_name

    def dimension(self, name: str) -> Optional[Dimension]:
        return self._by_name.get(name)

    def without(self, names: Iterable[str]) -> "TensorType":
        drop = set(names)
        return TensorType(dim for dim in self._dimensions if dim.name not in drop)

    def to_spec(self) -> str:
        if self._is_error:
            return "error"
        if not self._dimensions:
            return "double"
        return "tensor(" + ",".join(dim.to_spec() for dim in self._dimensions) + ")"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TensorType):
            return NotImplemented
        return self._is_error == other._is_error and self._dimensions == other._dimensions

    def __hash__(self) -> int:
        return hash((self._is_error, self._dimensions))

    def __iter__(self):
        return iter(self._dimensions)

    def __len__(self) -> int:
        return len(self._dimensions)

    def __repr__(self) -> str:
        return f"TensorType({self.to_spec()})"


ERROR_TYPE = TensorType.error()
SCALAR_TYPE = TensorType.scalar()
