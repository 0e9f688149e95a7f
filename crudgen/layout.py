# File: crudgen/layout.py
"""
CrudGen - Shared Layout Precondition
=====================================

Generated views extend a shared layout (``layouts.app`` by default).  The
orchestrator only asks a ``LayoutProvider`` to make sure it exists; how
that happens is host-framework specific:

* ``ArtisanLayoutProvider`` installs the UI package for the chosen stack
  with composer and runs the matching artisan scaffold command.
* ``NullLayoutProvider`` is used when the layout check is disabled.

Both subprocesses are blocking.  Composer output is streamed line by line
as it arrives; the artisan command inherits the terminal.
"""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from crudgen.exceptions import LayoutBootstrapError
from crudgen.exporters import ArtifactPaths
from crudgen.models import Stack

logger: logging.Logger = logging.getLogger("crudgen.layout")

# Stack → (composer packages, scaffold commands)
_SCAFFOLDS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    Stack.BOOTSTRAP.value: (("laravel/ui",), ("php artisan ui bootstrap --auth",)),
    Stack.TAILWIND.value: (("laravel/breeze",), ("php artisan breeze:install blade",)),
}


class LayoutProvider(ABC):
    """Capability: make sure the shared layout exists before views are written."""

    @abstractmethod
    def ensure_layout(self) -> bool:
        """Return True when the layout exists (possibly after creating it)."""


class NullLayoutProvider(LayoutProvider):
    """No layout requirement."""

    def ensure_layout(self) -> bool:
        return True


class ArtisanLayoutProvider(LayoutProvider):
    """
    Bootstraps the layout of a Laravel application.

    Args:
        paths: Artifact paths of the target application.
        layout: Dotted layout view name (``layouts.app``).
        stack: View stack; selects the UI package and scaffold command.
        echo: Receives operator-facing output.
    """

    def __init__(
        self,
        paths: ArtifactPaths,
        layout: str,
        stack: str = Stack.BOOTSTRAP.value,
        *,
        echo: Callable[[str], None] = print,
    ) -> None:
        self._paths: ArtifactPaths = paths
        self._layout: str = layout
        self._stack: str = getattr(stack, "value", stack)
        self._echo: Callable[[str], None] = echo

    @property
    def layout_path(self) -> Path:
        return self._paths.layout_view(self._layout)

    def layout_exists(self) -> bool:
        return self.layout_path.is_file()

    def ensure_layout(self) -> bool:
        if self.layout_exists():
            logger.debug("Layout present: %s", self.layout_path)
            return True

        packages, commands = _SCAFFOLDS.get(self._stack, _SCAFFOLDS[Stack.BOOTSTRAP.value])

        self._echo("Creating Layout ...")
        logger.info("Layout '%s' missing; installing %s.", self._layout, ", ".join(packages))

        if not self.require_composer_packages(packages, dev=True):
            raise LayoutBootstrapError(
                f"Unable to install {', '.join(packages)}. Please install it manually"
            )

        status: int = self.run_commands(commands)
        if status != 0:
            logger.error("Layout scaffold exited with status %d.", status)
            return False
        if not self.layout_exists():
            logger.error("Layout scaffold did not create %s.", self.layout_path)
            return False
        return True

    # -----------------------------------------------------------------
    # Subprocess helpers
    # -----------------------------------------------------------------

    def require_composer_packages(self, packages: Sequence[str], dev: bool = False) -> bool:
        """Run ``composer require``, streaming its output; True on exit status 0."""
        command: List[str] = ["composer", "require", *packages]
        if dev:
            command.append("--dev")

        env: Dict[str, str] = dict(os.environ)
        env["COMPOSER_MEMORY_LIMIT"] = "-1"

        logger.info("Running: %s", " ".join(command))
        try:
            proc: subprocess.Popen = subprocess.Popen(
                command,
                cwd=str(self._paths.base),
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as exc:
            raise LayoutBootstrapError(f"composer is not available: {exc}") from exc

        assert proc.stdout is not None
        for line in proc.stdout:
            self._echo(line.rstrip("\n"))
        return proc.wait() == 0

    def run_commands(self, commands: Sequence[str]) -> int:
        """Run *commands* joined with ``&&`` in a shell attached to the terminal."""
        joined: str = " && ".join(commands)
        logger.info("Running: %s", joined)
        completed: subprocess.CompletedProcess = subprocess.run(
            joined,
            shell=True,
            cwd=str(self._paths.base),
        )
        return completed.returncode


def make_layout_provider(
    paths: ArtifactPaths,
    layout: Optional[str],
    stack: str,
    *,
    echo: Callable[[str], None] = print,
) -> LayoutProvider:
    """Default provider for a config: none when the layout is disabled."""
    if not layout:
        return NullLayoutProvider()
    return ArtisanLayoutProvider(paths, layout, stack, echo=echo)


__all__: List[str] = [
    "LayoutProvider",
    "NullLayoutProvider",
    "ArtisanLayoutProvider",
    "make_layout_provider",
]
