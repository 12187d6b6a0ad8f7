"""
Output Utilities
================

Small helpers used by the command-line runner to store run results.
"""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import numpy as np


def timestamp_now() -> str:
    """Filesystem-friendly timestamp, e.g. ``'2024-01-15_14.30.45'``."""
    return datetime.now().strftime("%Y-%m-%d_%H.%M.%S")


def ensure_dir(path: Path) -> Path:
    """``mkdir -p`` returning ``path``."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json(path: Path, data: Any, *, indent: int = 2) -> None:
    """
    Write ``data`` as JSON with sorted keys, creating parent directories.

    NumPy scalars and arrays are converted to plain numbers and lists.
    """
    ensure_dir(path.parent)

    def _default(o: Any) -> Any:
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, np.generic):
            return o.item()
        return str(o)

    path.write_text(
        json.dumps(data, indent=indent, sort_keys=True, default=_default),
        encoding="utf-8",
    )


def resolve_callable(path: str) -> Callable[..., Any]:
    """
    Import ``"package.module:attribute"`` and return the attribute.

    Raises
    ------
    ValueError
        If ``path`` has no ``:`` or the attribute is not callable.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Expected 'module:callable', got '{path}'")
    target: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)
    if not callable(target):
        raise ValueError(f"'{path}' is not callable")
    return target
