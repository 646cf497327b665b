# selectorkit/serialization.py
from __future__ import annotations

"""JSON helpers
---------------
`get_json` renders a value as compact JSON text; `from_json` parses JSON text
and attaches a class to the resulting mapping without running its __init__.
"""

import dataclasses
import json
import math
from typing import Any, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


def _finite(obj: Any) -> Any:
    # NaN and +/-Infinity have no JSON spelling; they become null
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _finite(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_finite(v) for v in obj]
    return obj


def _to_plain(obj: Any) -> Any:
    """json.dumps `default=` hook for dataclasses, pydantic models and plain objects."""
    if isinstance(obj, BaseModel):
        return _finite(obj.model_dump(mode="json"))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _finite(dataclasses.asdict(obj))
    if hasattr(obj, "__dict__"):
        return _finite(vars(obj))
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def get_json(obj: Any) -> str:
    """
    Compact JSON representation of `obj`.

        [1, 2, 3]                     → '[1,2,3]'
        {"width": 10, "height": 20}   → '{"width":10,"height":20}'
        Rectangle(10, 20)             → '{"width":10,"height":20}'
        float("nan")                  → 'null'
    """
    return json.dumps(_finite(obj), allow_nan=False, separators=(",", ":"), ensure_ascii=False, default=_to_plain)


def from_json(cls: Type[T], text: str) -> T:
    """
    Parse `text` and return an instance of `cls` carrying the parsed fields.

    The constructor is bypassed: fields are attached as they appear in the JSON,
    so `from_json(Circle, '{"radius": 10}')` yields a Circle with radius 10 and
    all of Circle's methods available.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}")
    if issubclass(cls, BaseModel):
        return cls.model_construct(**data)
    obj = cls.__new__(cls)
    if hasattr(obj, "__dict__"):
        obj.__dict__.update(data)
    else:
        # __slots__ classes: each key must name a slot
        for key, value in data.items():
            object.__setattr__(obj, key, value)
    return obj


__all__ = ["get_json", "from_json"]
