try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _load_version
except ImportError:  # pragma: no cover
    from importlib_metadata import (  # type: ignore
        PackageNotFoundError,
    )
    from importlib_metadata import (
        version as _load_version,
    )

from . import core
from .core import functions
from .core.aggr import Aggr
from .core.config import ReferenceConfig
from .core.exceptions import (
    ConfigError,
    TensorRefError,
    TypeSpecError,
    UnknownAggregatorError,
)
from .core.labels import Address, Index, Name
from .core.operations import (
    concat,
    create,
    join,
    map,
    merge,
    peek,
    reduce,
    rename,
)
from .core.types import Dimension, Indexed, Mapped, TensorType
from .core.value import TensorValue, error_value
from .interop import assert_matches_reference, from_numpy, to_numpy

try:
    __version__ = _load_version("tensorref")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Address",
    "Aggr",
    "ConfigError",
    "Dimension",
    "Index",
    "Indexed",
    "Mapped",
    "Name",
    "ReferenceConfig",
    "TensorRefError",
    "TensorType",
    "TensorValue",
    "TypeSpecError",
    "UnknownAggregatorError",
    "assert_matches_reference",
    "concat",
    "core",
    "create",
    "error_value",
    "from_numpy",
    "functions",
    "join",
    "map",
    "merge",
    "peek",
    "reduce",
    "rename",
    "to_numpy",
    "__version__",
]
