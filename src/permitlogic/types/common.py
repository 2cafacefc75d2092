"""Cross-module type aliases."""

from __future__ import annotations

from typing import Any, TypeAlias

FactScalar: TypeAlias = float | bool | str
OutputValue: TypeAlias = float | int | bool | str | list[Any]
OutputRecord: TypeAlias = dict[str, OutputValue]
