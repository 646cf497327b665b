import importlib.util
from pathlib import Path
import textwrap

import pytest

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def script(fresh_logging):
    spec = importlib.util.spec_from_file_location("validate_recipes", ROOT / "scripts" / "validate_recipes.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write(root: Path, name: str, body: str) -> Path:
    p = root / name
    p.write_text(textwrap.dedent(body), encoding="utf-8")
    return p


GOOD = """
name: good
selectors:
  - name: main
    fragments: [{id: main}]
"""


def test_all_valid_returns_zero(script, tmp_path: Path):
    write(tmp_path, "good.yaml", GOOD)
    assert script.main(tmp_path) == 0


def test_build_error_is_reported_not_raised(script, tmp_path: Path):
    write(tmp_path, "good.yaml", GOOD)
    write(
        tmp_path,
        "bad.yaml",
        """
        name: bad
        selectors:
          - name: late_id
            fragments: [{class: a}, {id: b}]
        """,
    )
    assert script.main(tmp_path) == 1


def test_schema_error_fails_the_run(script, tmp_path: Path):
    write(tmp_path, "broken.yaml", "name: broken\nselectors: nope\n")
    assert script.main(tmp_path) == 1


def test_missing_directory(script, tmp_path: Path):
    assert script.main(tmp_path / "absent") == 1
