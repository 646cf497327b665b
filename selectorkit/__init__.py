"""
selector-kit
------------
Fluent CSS selector builder with ordering rules, YAML selector recipes,
and a few small object helpers (Rectangle, JSON round-tripping).
"""

from selectorkit.selectors import (
    DuplicateError,
    OrderError,
    Selector,
    SelectorBuildError,
    SelectorBuilder,
    css_selector_builder,
)
from selectorkit.serialization import from_json, get_json
from selectorkit.shapes import Rectangle

__all__ = [
    "Selector",
    "SelectorBuilder",
    "css_selector_builder",
    "SelectorBuildError",
    "DuplicateError",
    "OrderError",
    "Rectangle",
    "get_json",
    "from_json",
]
