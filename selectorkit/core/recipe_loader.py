"""Selector recipe schema and loader
-----------------------------------
Defines the pydantic models for named selectors described in YAML, loads
single- and multi-document recipe files, and renders them through the builder.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from selectorkit.selectors.builder import Selector, SelectorBuildError, css_selector_builder
from selectorkit.selectors.fragments import FragmentKind, parse_kind
from selectorkit.utils.logger import get_logger, log_with_context

log = get_logger(__name__)


# ---------- Fragment / selector models ----------


class FragmentSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: FragmentKind
    value: str = Field(..., description="Fragment text without its prefix, e.g. 'main' for #main")

    @model_validator(mode="before")
    @classmethod
    def _short_form(cls, data: Any) -> Any:
        # {element: div} → {kind: element, value: div}
        if isinstance(data, dict) and "kind" not in data and len(data) == 1:
            (kind, value), = data.items()
            return {"kind": kind, "value": value}
        return data

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, v: Any) -> FragmentKind:
        if isinstance(v, FragmentKind):
            return v
        return parse_kind(str(v))

    @field_validator("value", mode="before")
    @classmethod
    def _value_non_empty(cls, v: Any) -> str:
        v = "" if v is None else str(v)
        if not v.strip():
            raise ValueError("fragment value cannot be empty")
        return v


class SpecBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, description="Required for top-level selectors")


class CompoundSpec(SpecBase):
    fragments: list[FragmentSpec] = Field(..., min_length=1)


class CombinationSpec(SpecBase):
    left: SelectorSpec
    combinator: str = Field(..., min_length=1, description="' ', '+', '~' or '>'")
    right: SelectorSpec


SelectorSpec = Union[CompoundSpec, CombinationSpec]
CombinationSpec.model_rebuild()


# ---------- Recipe model ----------


class Recipe(BaseModel):
    version: str = Field(default="1")
    name: str = Field(..., description="Recipe name, defaults to the file stem")
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    selectors: list[SelectorSpec] = Field(..., min_length=1)

    @field_validator("version", mode="before")
    @classmethod
    def _version_str(cls, v: Any) -> str:
        return str(v)

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @model_validator(mode="after")
    def _named_and_unique(self) -> Recipe:
        seen: set[str] = set()
        for idx, spec in enumerate(self.selectors):
            name = (spec.name or "").strip()
            if not name:
                raise ValueError(f"selectors[{idx}] needs a name")
            if name in seen:
                raise ValueError(f"duplicate selector name '{name}'")
            seen.add(name)
        return self


# ---------- Rendering ----------


def render_spec(spec: SelectorSpec) -> Selector:
    """Build a Selector from a compound or combination spec."""
    if isinstance(spec, CompoundSpec):
        selector = Selector()
        for fragment in spec.fragments:
            selector = selector.append(fragment.kind, fragment.value)
        return selector
    return css_selector_builder.combine(render_spec(spec.left), spec.combinator, render_spec(spec.right))


def build_recipe(recipe: Recipe) -> dict[str, str]:
    """
    Render every selector of a recipe, in definition order.

    Builder errors keep their type; the message is prefixed with the selector name.
    """
    out: dict[str, str] = {}
    for spec in recipe.selectors:
        scoped = log_with_context(log, recipe=recipe.name, selector=spec.name)
        try:
            out[spec.name] = render_spec(spec).stringify()
        except SelectorBuildError as e:
            scoped.debug(f"Selector '{spec.name}' failed to build: {e}")
            raise type(e)(f"{spec.name}: {e}") from e
        scoped.debug(f"{spec.name} -> {out[spec.name]!r}")
    return out


# ---------- Loading helpers ----------


_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _subst_env(obj: Any) -> Any:
    """Replace ${VAR} in every string; unknown variables are left as written."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _validate(data: dict, path: Path, doc_idx: Optional[int] = None) -> Recipe:
    data = dict(data)
    data.setdefault("name", path.stem)
    try:
        return Recipe.model_validate(_subst_env(data))
    except ValidationError as ve:
        where = f" (document {doc_idx})" if doc_idx is not None else ""
        lines = [f"Invalid recipe '{path}'{where}:"]
        for e in ve.errors():
            loc = ".".join(str(p) for p in e.get("loc", []))
            msg = e.get("msg", "invalid value")
            lines.append(f"  - {loc}: {msg}")
        raise ValueError("\n".join(lines)) from ve


# ---------- Public API ----------


def load_recipe(path: Path | str) -> Recipe:
    recipe_path = Path(path)
    if not recipe_path.exists():
        raise FileNotFoundError(f"Recipe file not found: {recipe_path}")
    try:
        data = yaml.safe_load(recipe_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {recipe_path}: {ye}") from ye
    if not isinstance(data, dict):
        raise ValueError("Recipe YAML must define a mapping/object at the top level.")
    return _validate(data, recipe_path)


def load_recipes_file(path: Path | str) -> list[Recipe]:
    """Load one or more recipes from a YAML file (supports multi-document)."""
    recipe_path = Path(path)
    if not recipe_path.exists():
        raise FileNotFoundError(f"Recipe file not found: {recipe_path}")
    try:
        docs = list(yaml.safe_load_all(recipe_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {recipe_path}: {ye}") from ye

    out: list[Recipe] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"Document {idx} in {recipe_path} must be a mapping/object.")
        out.append(_validate(data, recipe_path, doc_idx=idx if len(docs) > 1 else None))
    if not out:
        raise ValueError(f"No recipe documents found in {recipe_path}")
    log.debug(f"Loaded {len(out)} recipe(s) from {recipe_path}")
    return out


def find_recipe_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


class RecipeLoader:
    def load_directory(self, root: Path, *, recursive: bool = True) -> list[tuple[Path, Recipe]]:
        """Load every valid recipe under `root`; invalid files are logged and skipped."""
        found: list[tuple[Path, Recipe]] = []
        for fp in find_recipe_files(root, recursive=recursive):
            try:
                found.extend((fp, recipe) for recipe in load_recipes_file(fp))
            except ValueError as e:
                log.warning(f"Skipping {fp}: {e}")
        return found


__all__ = [
    "FragmentSpec",
    "CompoundSpec",
    "CombinationSpec",
    "SelectorSpec",
    "Recipe",
    "render_spec",
    "build_recipe",
    "load_recipe",
    "load_recipes_file",
    "find_recipe_files",
    "RecipeLoader",
]
