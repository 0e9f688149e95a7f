# File: crudgen/exporters.py
"""
CrudGen - Output Writer
========================

Responsible for:
    1. Deriving every artifact path from the naming vocabulary and the
       configured namespaces.
    2. Creating missing parent directories.
    3. Asking before an existing file is replaced; a "no" skips that one
       artifact and the run carries on.
    4. Writing atomically (write-to-temp then rename) so a later read of
       the same path never sees a partial file.

No locking: there is exactly one writer per run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from crudgen.models import GenerationConfig, NamingVocabulary
from crudgen.utils import count_lines, namespace_to_path, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.exporters")

# Asked with a question; returns True to overwrite.
ConfirmFn = Callable[[str], bool]


def always_overwrite(question: str) -> bool:
    return True


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of one artifact, written or skipped."""

    label: str
    relative_path: str
    absolute_path: str
    size_bytes: int = 0
    line_count: int = 0
    sha256: str = ""
    skipped: bool = False


# ---------------------------------------------------------------------------
# Path derivation
# ---------------------------------------------------------------------------


class ArtifactPaths:
    """
    Where each generated artifact lives inside the target application.

    Namespaces map onto ``app/`` (``App\\Http\\Controllers`` →
    ``app/Http/Controllers``); views go under
    ``resources/views/<model-view>/``.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._base: Path = Path(config.base_path).expanduser().resolve()

    @property
    def base(self) -> Path:
        return self._base

    def app_path(self, namespace: str, filename: str) -> Path:
        sub: str = namespace_to_path(namespace)
        root: Path = self._base / "app"
        return (root / sub / filename) if sub else (root / filename)

    def controller(self, vocab: NamingVocabulary) -> Path:
        return self.app_path(self._config.controller_namespace, f"{vocab.controller_name}.php")

    def model(self, vocab: NamingVocabulary) -> Path:
        return self.app_path(self._config.model_namespace, f"{vocab.model_name}.php")

    def request(self, vocab: NamingVocabulary) -> Path:
        return self.app_path(self._config.request_namespace, f"{vocab.request_name}.php")

    def view(self, vocab: NamingVocabulary, view: str) -> Path:
        return self._base / "resources" / "views" / vocab.model_view / f"{view}.blade.php"

    def layout_view(self, layout: str) -> Path:
        """``layouts.app`` → ``resources/views/layouts/app.blade.php``."""
        parts: List[str] = layout.split(".")
        return self._base.joinpath("resources", "views", *parts[:-1], f"{parts[-1]}.blade.php")

    def relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self._base).as_posix()
        except ValueError:
            return str(path)


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """
    Persists generated content, one artifact at a time.

    Usage::

        writer = ArtifactWriter(paths, confirm=ask_user)
        record = writer.write(paths.controller(vocab), content, "Controller")

    Thread-safety: NOT thread-safe.  One writer per run.
    """

    def __init__(
        self,
        paths: ArtifactPaths,
        *,
        confirm: Optional[ConfirmFn] = None,
        force: bool = False,
    ) -> None:
        self._paths: ArtifactPaths = paths
        self._confirm: ConfirmFn = confirm or always_overwrite
        self._force: bool = force
        self._records: List[FileRecord] = []

    @property
    def records(self) -> List[FileRecord]:
        return list(self._records)

    def should_write(self, path: Path, label: str) -> bool:
        """True unless *path* exists and the operator declines to overwrite it."""
        if self._force or not path.exists():
            return True
        question: str = (
            f"{label} already exists at {self._paths.relative(path)}. "
            "Do you want to overwrite it?"
        )
        return bool(self._confirm(question))

    def write(self, path: Path, content: str, label: str) -> FileRecord:
        """
        Write *content* to *path* unless the overwrite check says no.

        ``OSError`` propagates unchanged.
        """
        rel: str = self._paths.relative(path)

        if not self.should_write(path, label):
            logger.info("Skipped %s (kept existing %s).", label, rel)
            record: FileRecord = FileRecord(
                label=label,
                relative_path=rel,
                absolute_path=str(path),
                skipped=True,
            )
            self._records.append(record)
            return record

        size: int = write_file(path, content)
        record = FileRecord(
            label=label,
            relative_path=rel,
            absolute_path=str(path),
            size_bytes=size,
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )
        self._records.append(record)
        logger.info("Wrote %s: %s (%d bytes).", label, rel, size)
        return record


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ConfirmFn",
    "always_overwrite",
    "FileRecord",
    "ArtifactPaths",
    "ArtifactWriter",
]

logger.debug("crudgen.exporters loaded.")
