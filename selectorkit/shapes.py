# selectorkit/shapes.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Rectangle:
    """Axis-aligned rectangle given by its side lengths."""

    width: float
    height: float

    def get_area(self) -> float:
        return self.width * self.height

    @property
    def area(self) -> float:
        return self.get_area()


__all__ = ["Rectangle"]
