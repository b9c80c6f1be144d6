"""Setuptools build hooks for tensorref."""

from __future__ import annotations

from setuptools import setup

# Pure Python package; metadata lives in pyproject.toml and the default
# ``bdist_wheel`` produces a ``py3-none-any`` wheel.
setup()
