from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, List

import numpy as np

from .exceptions import UnknownAggregatorError


class Aggregator:
    """Stateful accumulator for one reduce group."""

    def first(self, value: float) -> None:
        raise NotImplementedError

    def next(self, value: float) -> None:
        raise NotImplementedError

    def result(self) -> float:
        raise NotImplementedError


class _Combining(Aggregator):
    def __init__(self, combine: Callable[[float, float], float]):
        self._combine = combine
        self._value = 0.0

    def first(self, value: float) -> None:
        self._value = value

    def next(self, value: float) -> None:
        self._value = self._combine(self._value, value)

    def result(self) -> float:
        return self._value


class _Avg(Aggregator):
    def __init__(self) -> None:
        self._sum = 0.0
        self._count = 0

    def first(self, value: float) -> None:
        self._sum = value
        self._count = 1

    def next(self, value: float) -> None:
        self._sum += value
        self._count += 1

    def result(self) -> float:
        return self._sum / self._count


class _Count(Aggregator):
    def __init__(self) -> None:
        self._count = 0

    def first(self, value: float) -> None:
        self._count = 1

    def next(self, value: float) -> None:
        self._count += 1

    def result(self) -> float:
        return float(self._count)


class _Median(Aggregator):
    def __init__(self) -> None:
        self._values: List[float] = []

    def first(self, value: float) -> None:
        self._values = [value]

    def next(self, value: float) -> None:
        self._values.append(value)

    def result(self) -> float:
        return float(np.median(np.asarray(self._values, dtype=np.float64)))


def _max(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return a if a >= b else b


def _min(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return a if a <= b else b


def _count(a: float, b: float) -> float:
    return a + 1.0


class Aggr(Enum):
    AVG = "avg"
    COUNT = "count"
    MAX = "max"
    MEDIAN = "median"
    MIN = "min"
    PROD = "prod"
    SUM = "sum"

    @property
    def identity(self) -> float:
        return _IDENTITY[self]

    def combine(self, a: float, b: float) -> float:
        """Fold one more value into a running result.

        AVG folds like SUM; its division by the group size happens in
        :meth:`Aggregator.result`. MEDIAN is not a fold and has no combiner.
        """
        if self is Aggr.MEDIAN:
            raise TypeError("MEDIAN cannot be expressed as a pairwise combine")
        return _COMBINE[self](a, b)

    def create(self) -> Aggregator:
        if self is Aggr.AVG:
            return _Avg()
        if self is Aggr.COUNT:
            return _Count()
        if self is Aggr.MEDIAN:
            return _Median()
        return _Combining(_COMBINE[self])

    @classmethod
    def from_name(cls, name: str) -> "Aggr":
        try:
            return cls(name.strip().lower())
        except (AttributeError, ValueError):
            raise UnknownAggregatorError(str(name)) from None


_IDENTITY: Dict[Aggr, float] = {
    Aggr.AVG: 0.0,
    Aggr.COUNT: 0.0,
    Aggr.MAX: -math.inf,
    Aggr.MEDIAN: math.nan,
    Aggr.MIN: math.inf,
    Aggr.PROD: 1.0,
    Aggr.SUM: 0.0,
}

_COMBINE: Dict[Aggr, Callable[[float, float], float]] = {
    Aggr.AVG: lambda a, b: a + b,
    Aggr.COUNT: _count,
    Aggr.MAX: _max,
    Aggr.MIN: _min,
    Aggr.PROD: lambda a, b: a * b,
    Aggr.SUM: lambda a, b: a + b,
}
