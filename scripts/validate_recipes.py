"""
Validate all YAML recipes under ./recipes (or the directory given as argv[1]).
Loads and builds every recipe; exits 1 if any file or selector is invalid.
Run: python scripts/validate_recipes.py [recipes_dir]
"""

import sys
from pathlib import Path

from selectorkit.core.recipe_loader import build_recipe, find_recipe_files, load_recipes_file
from selectorkit.selectors.builder import SelectorBuildError
from selectorkit.utils.logger import configure_logging, get_logger


def main(root: Path = Path("recipes")) -> int:
    configure_logging()
    log = get_logger(__name__)

    if not root.exists():
        log.error(f"No {root}/ directory found.")
        return 1

    checked = failed = 0
    for fp in find_recipe_files(root):
        try:
            recipes = load_recipes_file(fp)
        except ValueError as e:
            failed += 1
            log.error(f"{fp}: {e}")
            continue
        for recipe in recipes:
            checked += 1
            try:
                build_recipe(recipe)
            except SelectorBuildError as e:
                failed += 1
                log.error(f"{fp} [{recipe.name}]: {e}")

    log.info(f"Validated {checked} recipe(s), {failed} failure(s).")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main(Path(sys.argv[1]) if len(sys.argv) > 1 else Path("recipes")))
