"""
Core package for selector-kit.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from selectorkit.core.recipe_loader import load_recipe, build_recipe
"""

__all__: list[str] = []
