from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import TypeSpecError
from .types import Dimension, Indexed, Mapped, TensorType


@dataclass(frozen=True, order=True)
class Index:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            raise TypeSpecError(f"Index label must be a non-negative integer, got {self.value!r}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Name:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeSpecError(f"Name label must be a string, got {self.value!r}")

    def __str__(self) -> str:
        return self.value


Label = Union[Index, Name]
RawLabel = Union[Index, Name, int, str]


def as_label(raw: RawLabel) -> Label:
    """Coerce a raw label: ``int`` becomes :class:`Index`, ``str`` becomes :class:`Name`."""
    if isinstance(raw, (Index, Name)):
        return raw
    if isinstance(raw, bool):
        raise TypeSpecError(f"Cannot use {raw!r} as a label")
    if isinstance(raw, int):
        return Index(raw)
    if isinstance(raw, str):
        return Name(raw)
    raise TypeSpecError(f"Cannot use {type(raw).__name__} as a label")


def label_fits(dim: Dimension, label: Label) -> bool:
    if isinstance(dim.kind, Indexed):
        return isinstance(label, Index) and label.value < dim.kind.size
    if isinstance(dim.kind, Mapped):
        return isinstance(label, Name)
    return False


def _sort_key(item: Tuple[str, Label]) -> Tuple[str, int, Any]:
    name, label = item
    if isinstance(label, Index):
        return (name, 0, label.value)
    return (name, 1, label.value)


class Address:
    """Immutable mapping from dimension name to label, kept sorted by name."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Tuple[str, RawLabel]] = ()):
        entries = {}
        for name, raw in items:
            if name in entries:
                raise TypeSpecError("Dimension appears twice in address", dimension=name)
            entries[name] = as_label(raw)
        self._items: Tuple[Tuple[str, Label], ...] = tuple(sorted(entries.items(), key=lambda kv: kv[0]))

    @classmethod
    def of(cls, mapping: Optional[Mapping[str, RawLabel]] = None, **labels: RawLabel) -> "Address":
        items = dict(mapping or {})
        items.update(labels)
        return cls(items.items())

    @classmethod
    def from_labels(cls, tensor_type: TensorType, labels: Sequence[RawLabel]) -> "Address":
        """Build an address from labels given in the type's dimension order."""
        names = tensor_type.names
        if len(labels) != len(names):
            raise TypeSpecError(f"Expected {len(names)} labels for {tensor_type.to_spec()}, got {len(labels)}")
        return cls(zip(names, labels))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self._items)

    def items(self) -> Tuple[Tuple[str, Label], ...]:
        return self._items

    def get(self, name: str) -> Optional[Label]:
        for key, label in self._items:
            if key == name:
                return label
        return None

    def __getitem__(self, name: str) -> Label:
        label = self.get(name)
        if label is None:
            raise KeyError(name)
        return label

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self._items)

    def project(self, drop: Iterable[str]) -> "Address":
        dropped = set(drop)
        return Address((name, label) for name, label in self._items if name not in dropped)

    def keep(self, names: Iterable[str]) -> "Address":
        kept = set(names)
        return Address((name, label) for name, label in self._items if name in kept)

    def extend(self, other: Union["Address", Mapping[str, RawLabel]]) -> "Address":
        extra = other.items() if isinstance(other, Address) else tuple(other.items())
        return Address(tuple(self._items) + tuple(extra))

    def rename(self, mapping: Mapping[str, str]) -> "Address":
        return Address((mapping.get(name, name), label) for name, label in self._items)

    def agrees_with(self, other: "Address", names: Iterable[str]) -> bool:
        return all(self.get(name) == other.get(name) for name in names)

    def valid_for(self, tensor_type: TensorType) -> bool:
        if tensor_type.is_error or self.names != tensor_type.names:
            return False
        return all(label_fits(dim, label) for dim, (_, label) in zip(tensor_type.dimensions, self._items))

    def sort_key(self) -> Tuple[Tuple[str, int, Any], ...]:
        return tuple(_sort_key(item) for item in self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        inner = ",".join(f"{name}:{_format_label(label)}" for name, label in self._items)
        return "{" + inner + "}"


def _format_label(label: Label) -> str:
    if isinstance(label, Index):
        return str(label.value)
    return repr(label.value)


EMPTY_ADDRESS = Address()
