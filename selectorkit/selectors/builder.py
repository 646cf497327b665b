# selectorkit/selectors/builder.py
from __future__ import annotations

from dataclasses import dataclass, replace

from selectorkit.selectors.fragments import FRAGMENT_RULES, FragmentKind
from selectorkit.utils.logger import get_logger

log = get_logger(__name__)


class SelectorBuildError(ValueError):
    pass


class DuplicateError(SelectorBuildError):
    pass


class OrderError(SelectorBuildError):
    pass


DUPLICATE_MESSAGE = "Element, id and pseudo-element should not occur more then one time inside the selector"
ORDER_MESSAGE = (
    "Selector parts should be arranged in the following order: "
    "element, id, class, attribute, pseudo-class, pseudo-element"
)


@dataclass(frozen=True)
class Selector:
    """
    Immutable compound selector under construction.

    Every fragment call validates against the current state and returns a new
    Selector; the receiver is never modified, so a failed call leaves it usable.
    """

    text: str = ""
    has_element: bool = False
    has_id: bool = False
    has_pseudo_element: bool = False
    last_rank: int = 0  # 0 = nothing appended yet

    def append(self, kind: FragmentKind, value: str) -> Selector:
        rule = FRAGMENT_RULES[kind]
        if rule.singleton and getattr(self, rule.flag):
            log.debug(f"Rejected second {kind.value} fragment {value!r} for {self.text!r}")
            raise DuplicateError(DUPLICATE_MESSAGE)
        if self.last_rank > rule.rank:
            log.debug(f"Rejected {kind.value} fragment {value!r} after rank {self.last_rank} in {self.text!r}")
            raise OrderError(ORDER_MESSAGE)

        changes = {"text": self.text + rule.render(value), "last_rank": rule.rank}
        if rule.singleton:
            changes[rule.flag] = True
        return replace(self, **changes)

    # ---------- Fluent fragment API ----------

    def element(self, value: str) -> Selector:
        return self.append(FragmentKind.element, value)

    def id(self, value: str) -> Selector:
        return self.append(FragmentKind.id, value)

    def class_(self, value: str) -> Selector:
        return self.append(FragmentKind.class_, value)

    def attr(self, value: str) -> Selector:
        return self.append(FragmentKind.attribute, value)

    attribute = attr

    def pseudo_class(self, value: str) -> Selector:
        return self.append(FragmentKind.pseudo_class, value)

    def pseudo_element(self, value: str) -> Selector:
        return self.append(FragmentKind.pseudo_element, value)

    # ---------- Output ----------

    def stringify(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


class SelectorBuilder:
    """
    Stateless facade: each entry point starts a brand-new Selector, so one
    builder can be shared by any number of independent constructions.

        b = SelectorBuilder()
        b.id("main").class_("container").class_("editable").stringify()
          → "#main.container.editable"
    """

    def element(self, value: str) -> Selector:
        return Selector().element(value)

    def id(self, value: str) -> Selector:
        return Selector().id(value)

    def class_(self, value: str) -> Selector:
        return Selector().class_(value)

    def attr(self, value: str) -> Selector:
        return Selector().attr(value)

    attribute = attr

    def pseudo_class(self, value: str) -> Selector:
        return Selector().pseudo_class(value)

    def pseudo_element(self, value: str) -> Selector:
        return Selector().pseudo_element(value)

    def combine(self, left: Selector, combinator: str, right: Selector) -> Selector:
        """
        Join two selectors with a combinator (' ', '+', '~', '>').

        The token is inserted verbatim between single spaces, so ' ' yields
        three spaces. The result starts over with no ordering state.
        """
        return Selector(text=f"{left.stringify()} {combinator} {right.stringify()}")


css_selector_builder = SelectorBuilder()
