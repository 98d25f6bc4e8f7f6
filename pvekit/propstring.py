"""Helpers for the comma separated ``key=value`` property strings used by the VE API."""

from __future__ import annotations

from collections.abc import Iterable


def parse_pairs(text: str) -> list[list[str]]:
    """Split a property string into its parts, each split on every ``=``.

    A part without ``=`` comes back as a one-element list; a part with
    several ``=`` signs comes back with more than two elements.
    """
    return [part.strip().split("=") for part in text.split(",")]


def flag(name: str, value: bool) -> str:
    """Render a boolean property as ``name=1`` or ``name=0``."""
    return f"{name}={'1' if value else '0'}"


def join_values(values: Iterable[str]) -> str:
    """Join rendered properties into a single property string."""
    return ",".join(values)