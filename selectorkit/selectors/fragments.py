# selectorkit/selectors/fragments.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class FragmentKind(str, Enum):
    element = "element"
    id = "id"
    class_ = "class"
    attribute = "attribute"
    pseudo_class = "pseudo_class"
    pseudo_element = "pseudo_element"


@dataclass(frozen=True)
class FragmentRule:
    rank: int
    template: str
    flag: Optional[str] = None  # Selector field guarding a singleton kind

    @property
    def singleton(self) -> bool:
        return self.flag is not None

    def render(self, value: str) -> str:
        return self.template.format(value)


# Canonical order inside a compound selector:
#   element#id.class[attr]:pseudo-class::pseudo-element
FRAGMENT_RULES: Dict[FragmentKind, FragmentRule] = {
    FragmentKind.element: FragmentRule(rank=1, template="{}", flag="has_element"),
    FragmentKind.id: FragmentRule(rank=2, template="#{}", flag="has_id"),
    FragmentKind.class_: FragmentRule(rank=3, template=".{}"),
    FragmentKind.attribute: FragmentRule(rank=4, template="[{}]"),
    FragmentKind.pseudo_class: FragmentRule(rank=5, template=":{}"),
    FragmentKind.pseudo_element: FragmentRule(rank=6, template="::{}", flag="has_pseudo_element"),
}

_ALIASES: Dict[str, FragmentKind] = {
    "class_": FragmentKind.class_,
    "attr": FragmentKind.attribute,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")


def parse_kind(name: str) -> FragmentKind:
    """
    Normalize the spellings people actually write into a FragmentKind:

    - "class" / "class_"                       → class
    - "attr" / "attribute"                     → attribute
    - "pseudoClass" / "pseudo-class"           → pseudo_class
    - "pseudoElement" / "pseudo-element"       → pseudo_element
    """
    key = _CAMEL_BOUNDARY.sub("_", name.strip()).lower().replace("-", "_")
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return FragmentKind(key)
    except ValueError:
        expected = ", ".join(k.value for k in FragmentKind)
        raise ValueError(f"Unknown fragment kind {name!r} (expected one of: {expected})") from None


__all__ = ["FragmentKind", "FragmentRule", "FRAGMENT_RULES", "parse_kind"]
