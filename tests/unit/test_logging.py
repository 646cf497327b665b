import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from selectorkit.cli import cli
from selectorkit.core.recipe_loader import Recipe, build_recipe
from selectorkit.selectors import OrderError
from selectorkit.utils.config import get_settings
from selectorkit.utils.logger import bind, configure_logging, get_logger, log_with_context, unbind

ROOT = Path(__file__).resolve().parents[2]


def _file_logging(monkeypatch, tmp_path: Path) -> Path:
    log_file = tmp_path / "logs" / "selectorkit.log"
    monkeypatch.setenv("LOG_TO_FILE", "true")
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    configure_logging()
    return log_file


def _read_entries(log_file: Path) -> list[dict]:
    for h in logging.getLogger().handlers:
        h.flush()
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]


def test_import_leaves_host_logging_alone(tmp_path: Path):
    code = (
        "import io, logging\n"
        "root = logging.getLogger()\n"
        "host = logging.StreamHandler(io.StringIO())\n"
        "root.addHandler(host)\n"
        "root.setLevel(logging.DEBUG)\n"
        "import selectorkit\n"
        "selectorkit.css_selector_builder.id('a').class_('b')\n"
        "print(host in root.handlers, root.level)\n"
    )
    env = {**os.environ, "PYTHONPATH": str(ROOT)}
    out = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, cwd=tmp_path, env=env, check=True
    )
    assert out.stdout.split() == ["True", str(logging.DEBUG)]


def test_get_logger_does_not_configure(fresh_logging):
    root = logging.getLogger()
    before = list(root.handlers)
    get_logger("selectorkit.anything").debug("quiet")
    assert root.handlers == before


def test_file_log_is_json_lines(fresh_logging, monkeypatch, tmp_path: Path):
    log_file = _file_logging(monkeypatch, tmp_path)
    bind(run_id="r-1")
    try:
        get_logger("selectorkit.test").info("hello %s", "there")
    finally:
        unbind("run_id")

    entry = _read_entries(log_file)[-1]
    assert entry["msg"] == "hello there"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "selectorkit.test"
    assert entry["run_id"] == "r-1"
    for key in ("ts", "thread", "process"):
        assert key in entry


def test_scoped_context_overrides_bound(fresh_logging, monkeypatch, tmp_path: Path):
    log_file = _file_logging(monkeypatch, tmp_path)
    bind(run_id="r-2", recipe="outer")
    try:
        log_with_context(get_logger("selectorkit.test"), recipe="inner").warning("scoped")
    finally:
        unbind("run_id", "recipe")

    entry = _read_entries(log_file)[-1]
    assert entry["msg"] == "scoped"
    assert entry["run_id"] == "r-2"
    assert entry["recipe"] == "inner"


def test_recipe_and_selector_names_reach_records(fresh_logging, monkeypatch, tmp_path: Path):
    log_file = _file_logging(monkeypatch, tmp_path)
    recipe = Recipe.model_validate(
        {"name": "ctx", "selectors": [{"name": "late", "fragments": [{"class": "a"}, {"id": "b"}]}]}
    )
    with pytest.raises(OrderError):
        build_recipe(recipe)

    tagged = [e for e in _read_entries(log_file) if e.get("selector") == "late"]
    assert tagged
    assert tagged[0]["recipe"] == "ctx"
    assert tagged[0]["logger"] == "selectorkit.core.recipe_loader"


def test_cli_log_level_option(fresh_logging):
    runner = CliRunner()
    result = runner.invoke(cli, ["--log-level", "debug", "config"])
    assert result.exit_code == 0
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert root.handlers
    assert all(h.level == logging.DEBUG for h in root.handlers)
