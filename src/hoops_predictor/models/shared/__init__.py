"""Shared model utilities reused across regression models (feature scaling)."""

from .scaling import standardize

__all__: list[str] = ["standardize"]
