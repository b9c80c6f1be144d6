from __future__ import annotations

from typing import Optional


class TensorRefError(Exception):
    """Base class for tensorref-specific exceptions."""


class TypeSpecError(TensorRefError, ValueError):
    def __init__(self, message: str, *, dimension: Optional[str] = None):
        detail = f" (dimension '{dimension}')" if dimension is not None else ""
        super().__init__(f"{message}{detail}")
        self.dimension = dimension


class ConfigError(TensorRefError, ValueError):
    pass


class UnknownAggregatorError(TensorRefError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown aggregator: {self.name!r}"
