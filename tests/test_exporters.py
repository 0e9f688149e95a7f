"""
tests/test_exporters.py
Unit tests for crudgen.exporters (artifact paths and the overwrite-aware writer).
"""

from __future__ import annotations

import os
import pathlib
import stat
from typing import List

import pytest

from crudgen.exporters import ArtifactPaths, ArtifactWriter
from crudgen.models import GenerationConfig
from crudgen.naming import resolve_naming
from crudgen.utils import count_lines, sha256_hex, write_file


# ===========================================================================
# Paths
# ===========================================================================


class TestArtifactPaths:

    def test_default_locations(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        paths = ArtifactPaths(config)
        vocab = resolve_naming("BlogPost", config)
        base = app_dir.resolve()
        assert paths.controller(vocab) == base / "app" / "Http" / "Controllers" / "BlogPostController.php"
        assert paths.model(vocab) == base / "app" / "Models" / "BlogPost.php"
        assert paths.request(vocab) == base / "app" / "Http" / "Requests" / "BlogPostRequest.php"
        assert paths.view(vocab, "index") == base / "resources" / "views" / "blog-post" / "index.blade.php"

    def test_nested_and_root_namespaces(self, app_dir: pathlib.Path) -> None:
        config = GenerationConfig(
            base_path=str(app_dir),
            controller_namespace="App\\Http\\Controllers\\Admin",
            model_namespace="App",
        )
        paths = ArtifactPaths(config)
        vocab = resolve_naming("Invoice", config)
        assert paths.relative(paths.controller(vocab)) == "app/Http/Controllers/Admin/InvoiceController.php"
        assert paths.relative(paths.model(vocab)) == "app/Invoice.php"

    def test_layout_view(self, config: GenerationConfig) -> None:
        paths = ArtifactPaths(config)
        assert paths.relative(paths.layout_view("layouts.app")) == "resources/views/layouts/app.blade.php"
        assert paths.relative(paths.layout_view("app")) == "resources/views/app.blade.php"


# ===========================================================================
# Writer
# ===========================================================================


class TestArtifactWriter:

    def test_creates_parent_directories(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        paths = ArtifactPaths(config)
        target = app_dir / "app" / "Http" / "Controllers" / "XController.php"
        record = ArtifactWriter(paths).write(target, "<?php\n", "Controller")

        assert target.read_text(encoding="utf-8") == "<?php\n"
        assert record.skipped is False
        assert record.relative_path == "app/Http/Controllers/XController.php"
        assert record.size_bytes == 6
        assert record.line_count == 1
        assert record.sha256 == sha256_hex("<?php\n")

    def test_confirm_not_asked_for_new_file(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        asked: List[str] = []

        def confirm(question: str) -> bool:
            asked.append(question)
            return False

        writer = ArtifactWriter(ArtifactPaths(config), confirm=confirm)
        writer.write(app_dir / "new.php", "x", "Model")
        assert asked == []

    def test_decline_keeps_existing_file(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        target = app_dir / "app" / "Models" / "Invoice.php"
        target.parent.mkdir(parents=True)
        target.write_text("hand edited", encoding="utf-8")
        asked: List[str] = []

        def confirm(question: str) -> bool:
            asked.append(question)
            return False

        writer = ArtifactWriter(ArtifactPaths(config), confirm=confirm)
        record = writer.write(target, "generated", "Model")

        assert record.skipped is True
        assert target.read_text(encoding="utf-8") == "hand edited"
        assert asked == ["Model already exists at app/Models/Invoice.php. Do you want to overwrite it?"]
        assert writer.records == [record]

    def test_accept_overwrites(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        target = app_dir / "x.php"
        target.write_text("old", encoding="utf-8")
        writer = ArtifactWriter(ArtifactPaths(config), confirm=lambda q: True)
        assert writer.write(target, "new", "X").skipped is False
        assert target.read_text(encoding="utf-8") == "new"

    def test_force_never_asks(self, config: GenerationConfig, app_dir: pathlib.Path) -> None:
        target = app_dir / "x.php"
        target.write_text("old", encoding="utf-8")

        def confirm(question: str) -> bool:
            raise AssertionError("confirm must not be called")

        writer = ArtifactWriter(ArtifactPaths(config), confirm=confirm, force=True)
        writer.write(target, "new", "X")
        assert target.read_text(encoding="utf-8") == "new"


# ===========================================================================
# Atomic write helper
# ===========================================================================


class TestWriteFile:

    def test_no_temp_files_left(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "out" / "file.txt"
        assert write_file(target, "héllo\n") == len("héllo\n".encode("utf-8"))
        assert os.listdir(target.parent) == ["file.txt"]

    def test_replaces_existing(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("a much longer previous content", encoding="utf-8")
        write_file(target, "short")
        assert target.read_text(encoding="utf-8") == "short"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    @pytest.mark.parametrize("mode", [0o644, 0o640, 0o664])
    def test_overwrite_keeps_mode(self, tmp_path: pathlib.Path, mode: int) -> None:
        target = tmp_path / "InvoiceController.php"
        target.write_text("<?php\n", encoding="utf-8")
        target.chmod(mode)
        write_file(target, "<?php // regenerated\n")
        assert stat.S_IMODE(target.stat().st_mode) == mode

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_new_file_follows_umask(self, tmp_path: pathlib.Path) -> None:
        previous = os.umask(0o022)
        try:
            target = tmp_path / "new.blade.php"
            write_file(target, "<div></div>\n")
        finally:
            os.umask(previous)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    @pytest.mark.parametrize("content, lines", [("", 0), ("a", 1), ("a\n", 1), ("a\nb", 2)])
    def test_count_lines(self, content: str, lines: int) -> None:
        assert count_lines(content) == lines
