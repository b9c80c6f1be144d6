"""Named scalar functions for ``map``, ``join`` and ``merge``.

All arithmetic runs through numpy float64 so results follow IEEE rules:
division by zero gives ``inf``/``nan`` instead of raising.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

UnaryFn = Callable[[float], float]
BinaryFn = Callable[[float, float], float]


def _unary(op) -> UnaryFn:
    def fn(x: float) -> float:
        with np.errstate(all="ignore"):
            return float(op(np.float64(x)))

    fn.__name__ = getattr(op, "__name__", "unary")
    return fn


def _binary(op) -> BinaryFn:
    def fn(a: float, b: float) -> float:
        with np.errstate(all="ignore"):
            return float(op(np.float64(a), np.float64(b)))

    fn.__name__ = getattr(op, "__name__", "binary")
    return fn


add = _binary(np.add)
sub = _binary(np.subtract)
mul = _binary(np.multiply)
div = _binary(np.divide)
pow = _binary(np.power)  # noqa: A001 - mirrors the expression-language name
max = _binary(np.maximum)  # noqa: A001
min = _binary(np.minimum)  # noqa: A001

exp = _unary(np.exp)
neg = _unary(np.negative)
square = _unary(np.square)
sqrt = _unary(np.sqrt)
log = _unary(np.log)


def relu(x: float) -> float:
    return float(np.maximum(np.float64(0.0), np.float64(x)))


def sigmoid(x: float) -> float:
    with np.errstate(all="ignore"):
        return float(1.0 / (1.0 + np.exp(-np.float64(x))))


def identity(x: float) -> float:
    return float(x)


UNARY: Dict[str, UnaryFn] = {
    "exp": exp,
    "identity": identity,
    "log": log,
    "neg": neg,
    "relu": relu,
    "sigmoid": sigmoid,
    "sqrt": sqrt,
    "square": square,
}

BINARY: Dict[str, BinaryFn] = {
    "add": add,
    "div": div,
    "max": max,
    "min": min,
    "mul": mul,
    "pow": pow,
    "sub": sub,
}
