from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import ConfigError

ROUNDING_MODES = ("half_away_from_zero", "half_even", "truncate", "floor")


@dataclass(frozen=True)
class ReferenceConfig:
    """
    Switches that affect how reference results are produced and compared.

    * ``rounding`` selects how a dynamically computed scalar becomes an integer
      label in ``peek``. The default rounds halves away from zero, so ``2.5``
      peeks index 3 and ``-2.5`` peeks label ``"-3"``.
    * ``rel_tol`` is the relative tolerance used when two tensor values are
      compared cell by cell.
    """

    rounding: str = "half_away_from_zero"  # "half_away_from_zero" | "half_even" | "truncate" | "floor"
    rel_tol: float = 1e-6

    def normalized(self) -> "ReferenceConfig":
        rounding = (self.rounding or "half_away_from_zero").lower()
        if rounding not in ROUNDING_MODES:
            raise ConfigError(f"Unsupported rounding mode: {self.rounding}")
        rel_tol = float(self.rel_tol)
        if math.isnan(rel_tol) or rel_tol < 0.0:
            raise ConfigError("rel_tol must be a non-negative number")
        return replace(self, rounding=rounding, rel_tol=rel_tol)


DEFAULT_CONFIG = ReferenceConfig()


def resolve_config(config: Optional[ReferenceConfig]) -> ReferenceConfig:
    if config is None:
        return DEFAULT_CONFIG
    return config.normalized()
