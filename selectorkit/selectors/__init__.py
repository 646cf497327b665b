"""
Selectors package
-----------------
Fluent builder for compound CSS selectors with ordering and singleton
checks, plus combinators for joining them.
"""

from .builder import (
    DuplicateError,
    OrderError,
    Selector,
    SelectorBuildError,
    SelectorBuilder,
    css_selector_builder,
)
from .fragments import FragmentKind, parse_kind

__all__ = [
    "Selector",
    "SelectorBuilder",
    "css_selector_builder",
    "SelectorBuildError",
    "DuplicateError",
    "OrderError",
    "FragmentKind",
    "parse_kind",
]
