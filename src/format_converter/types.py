"""Shared type aliases used across the package."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

type FormatTag = str
type FormatPair = tuple[FormatTag, FormatTag]

type OptionScalar = str | int | float | bool | None | Path
type OptionValue = (
    OptionScalar
    | tuple["OptionValue", ...]
    | list["OptionValue"]
    | dict[str, "OptionValue"]
)
type OptionMap = Mapping[str, OptionValue]
type MutableOptionMap = dict[str, OptionValue]
