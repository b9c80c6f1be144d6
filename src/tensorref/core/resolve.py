"""Turn scalar sub-results into dimension labels.

``peek`` and ``create`` receive their dynamic inputs as fully evaluated child
tensors. A child is first folded to one number by plain summation of all its
cells (an empty child is ``0.0``), then rounded to an integer and checked
against the target dimension.
"""

from __future__ import annotations

import math
from decimal import ROUND_FLOOR, ROUND_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Optional

from .config import ReferenceConfig, resolve_config
from .exceptions import ConfigError
from .labels import Index, Label, Name
from .types import Dimension, Indexed
from .value import TensorValue

_DECIMAL_ROUNDING = {
    "half_away_from_zero": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
    "truncate": ROUND_DOWN,
    "floor": ROUND_FLOOR,
}


def child_scalar(child: TensorValue) -> float:
    return child.sum()


def round_label_value(value: float, rounding: str = "half_away_from_zero") -> Optional[int]:
    """Round ``value`` to an integer, or ``None`` when it is NaN or infinite.

    Decimal's ROUND_HALF_UP rounds ties away from zero.
    """
    if not math.isfinite(value):
        return None
    try:
        mode = _DECIMAL_ROUNDING[rounding]
    except KeyError:
        raise ConfigError(f"Unsupported rounding mode: {rounding}") from None
    return int(Decimal(value).to_integral_value(rounding=mode))


def resolve_label(
    dim: Dimension,
    value: float,
    config: Optional[ReferenceConfig] = None,
) -> Optional[Label]:
    """Map a computed scalar onto ``dim``.

    Indexed dimensions yield an :class:`Index` when the rounded value lies in
    ``[0, size)``. Mapped dimensions yield a :class:`Name` holding the canonical
    decimal text of the rounded value. ``None`` means nothing can match.
    """
    cfg = resolve_config(config)
    number = round_label_value(value, cfg.rounding)
    if number is None:
        return None
    if isinstance(dim.kind, Indexed):
        if 0 <= number < dim.kind.size:
            return Index(number)
        return None
    return Name(str(number))
