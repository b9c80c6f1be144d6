"""Core modules for the reference tensor algebra."""

__all__ = [
    "aggr",
    "config",
    "exceptions",
    "functions",
    "labels",
    "operations",
    "resolve",
    "types",
    "value",
]
