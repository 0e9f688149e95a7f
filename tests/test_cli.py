"""
tests/test_cli.py
Tests for crudgen.cli (argument handling, exit codes, overwrite prompt).

``cli_main`` always ends with ``sys.exit``; tests assert on the
``SystemExit`` code.
"""

from __future__ import annotations

import builtins
import pathlib
from typing import List

import pytest

from crudgen import __version__
from crudgen.cli import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    ask_overwrite,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        cli_main(argv)
    return exc.value.code


@pytest.fixture()
def base_args(schema_yaml_path: pathlib.Path, app_dir: pathlib.Path) -> List[str]:
    return [
        "--schema-file", str(schema_yaml_path),
        "--base-path", str(app_dir),
        "--no-layout",
        "--force",
    ]


class TestCliGeneration:

    def test_success(self, base_args: List[str], app_dir: pathlib.Path, capsys) -> None:
        assert _run(["blog_posts", *base_args]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Please add this route in web.php:" in out
        assert "Route::resource('blog-posts', BlogPostController::class);" in out
        assert (app_dir / "app" / "Models" / "BlogPost.php").is_file()

    def test_summary_on_stderr(self, base_args: List[str], capsys) -> None:
        _run(["blog_posts", *base_args])
        assert "CrudGen - Generation Report" in capsys.readouterr().err

    def test_quiet_hides_summary(self, base_args: List[str], capsys) -> None:
        _run(["blog_posts", *base_args, "-q"])
        assert "Generation Report" not in capsys.readouterr().err

    def test_route_option(self, base_args: List[str], capsys) -> None:
        assert _run(["invoices", *base_args, "--route", "bills"]) == EXIT_SUCCESS
        assert "Route::resource('bills', InvoiceController::class);" in capsys.readouterr().out

    def test_stack_option(self, base_args: List[str], app_dir: pathlib.Path) -> None:
        assert _run(["invoices", *base_args, "--stack", "tailwind"]) == EXIT_SUCCESS
        form = (app_dir / "resources" / "views" / "invoice" / "form.blade.php").read_text(encoding="utf-8")
        assert "<x-text-input" in form

    def test_config_file(self, base_args: List[str], write_yaml, app_dir: pathlib.Path) -> None:
        config = write_yaml("crud.yaml", {"model_namespace": "App\\Domain"})
        assert _run(["invoices", *base_args, "--config", str(config)]) == EXIT_SUCCESS
        assert (app_dir / "app" / "Domain" / "Invoice.php").is_file()

    def test_missing_table(self, base_args: List[str], app_dir: pathlib.Path, capsys) -> None:
        assert _run(["comments", *base_args]) == EXIT_VALIDATION_ERROR
        assert "`comments` table not exist" in capsys.readouterr().out
        assert not (app_dir / "app").exists()

    def test_invalid_route(self, base_args: List[str]) -> None:
        assert _run(["invoices", *base_args, "--route", "bills'"]) == EXIT_VALIDATION_ERROR


class TestCliInputErrors:

    def test_no_schema_source(self, app_dir: pathlib.Path) -> None:
        assert _run(["invoices", "--base-path", str(app_dir)]) == EXIT_INPUT_ERROR

    def test_missing_config_file(self, base_args: List[str], tmp_path: pathlib.Path) -> None:
        assert _run(["invoices", *base_args, "-c", str(tmp_path / "nope.yaml")]) == EXIT_INPUT_ERROR

    def test_invalid_config_file(self, base_args: List[str], write_yaml) -> None:
        config = write_yaml("crud.yaml", {"unknown_option": 1})
        assert _run(["invoices", *base_args, "-c", str(config)]) == EXIT_INPUT_ERROR

    def test_unknown_stack_rejected_by_parser(self, base_args: List[str]) -> None:
        assert _run(["invoices", *base_args, "--stack", "foundation"]) == 2

    def test_exclusive_sources(self, base_args: List[str]) -> None:
        assert _run(["invoices", *base_args, "--database-url", "sqlite://"]) == 2

    def test_version(self, capsys) -> None:
        assert _run(["--version"]) == 0
        assert __version__ in capsys.readouterr().out


class TestAskOverwrite:

    @pytest.mark.parametrize(
        "answer, expected",
        [("", True), ("y", True), ("Yes", True), ("n", False), ("no", False), ("maybe", False)],
    )
    def test_answers(self, monkeypatch, answer: str, expected: bool) -> None:
        monkeypatch.setattr(builtins, "input", lambda prompt: answer)
        assert ask_overwrite("Model already exists. Do you want to overwrite it?") is expected

    def test_prompt_text(self, monkeypatch) -> None:
        prompts: List[str] = []

        def fake_input(prompt: str) -> str:
            prompts.append(prompt)
            return ""

        monkeypatch.setattr(builtins, "input", fake_input)
        ask_overwrite("Controller already exists.")
        assert prompts == ["Controller already exists. (yes/no) [yes]: "]

    def test_closed_stdin_uses_default(self, monkeypatch) -> None:
        def closed_stdin(prompt: str) -> str:
            raise EOFError

        monkeypatch.setattr(builtins, "input", closed_stdin)
        assert ask_overwrite("x") is True
