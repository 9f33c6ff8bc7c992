"""
Smoke tests for package structure and availability.

These tests strictly verify that the package is installed correctly in the
environment and that top-level modules are importable.
"""

from __future__ import annotations

import importlib

import metricline
from metricline import __version__


def test_package_importable() -> None:
    """Ensure the top-level package can be imported."""
    mod = importlib.import_module("metricline")
    assert mod is not None


def test_version_is_set() -> None:
    """Ensure the package exposes a valid version string."""
    assert isinstance(__version__, str)
    assert len(__version__) > 0


def test_public_api_is_reexported() -> None:
    """The timeline operations are reachable from the package root."""
    for name in ("MetricStore", "Snapshot", "trim", "infer", "extract_numbers", "rate"):
        assert hasattr(metricline, name), name


def test_cli_module_exposes_app() -> None:
    """The `metricline` console script points at `metricline.cli:app`."""
    cli = importlib.import_module("metricline.cli")
    assert hasattr(cli, "app"), "metricline.cli must expose an 'app' Typer object."
