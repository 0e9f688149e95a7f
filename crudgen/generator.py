# File: crudgen/generator.py
"""
CrudGen - Generation Pipeline (Orchestrator)
=============================================

Connects every phase for one table:

    Validate → Resolve Naming → Controller → Model + Request → Views → Route

Workflow::

    1. Validate the configuration, then check the table exists.  Nothing
       is written when either check fails.
    2. Resolve the naming vocabulary once.
    3. Render the controller stub.
    4. Render the model stub (``{{fillable}}``) and the form request stub
       (``{{rules}}``); each is skippable on its own.
    5. Build the per-column view blocks, make sure the shared layout
       exists, then render the five views.
    6. Print the resource route line for the operator.

Error handling strategy:
    - Every known failure is a ``CrudGenError``; those and ``OSError`` are
      caught at one point in ``generate()``, the message is recorded
      unmodified in the report and the run stops.
    - Declining an overwrite is not an error.
    - There are no retries.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from crudgen.columns import (
    build_field_view_models,
    fillable_list,
    filter_columns,
    model_casts,
    validation_rules,
)
from crudgen.exceptions import ConfigError, CrudGenError, LayoutBootstrapError, TableNotFoundError
from crudgen.exporters import ArtifactPaths, ArtifactWriter, ConfirmFn, FileRecord
from crudgen.layout import LayoutProvider, make_layout_provider
from crudgen.models import ColumnDescriptor, FieldViewModel, GenerationConfig, NamingVocabulary
from crudgen.naming import (
    PlaceholderMap,
    build_replacements,
    entity_name_for_table,
    merge_replacements,
    resolve_naming,
    route_line,
)
from crudgen.schema import SchemaReader, load_structured_file, make_schema_reader
from crudgen.templates import VIEW_NAMES, FieldRenderer, StubLoader, get_renderer
from crudgen.utils import Timer
from crudgen.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generator")

EchoFn = Callable[[str], None]


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``CrudGenerator.generate()``.

    ``validation_errors`` holds precondition failures (invalid config,
    missing stubs, missing table): nothing was written.  ``errors`` holds
    failures raised after generation started.
    """

    success: bool = False
    table: str = ""
    model_name: str = ""
    route_line: str = ""
    base_path: str = ""

    total_elapsed_seconds: float = 0.0

    records: List[FileRecord] = field(default_factory=list)
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def written(self) -> List[FileRecord]:
        return [r for r in self.records if not r.skipped]

    @property
    def skipped(self) -> List[FileRecord]:
        return [r for r in self.records if r.skipped]

    @property
    def total_bytes(self) -> int:
        return sum(r.size_bytes for r in self.written)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append(f"{'=' * 60}")
        lines.append("  CrudGen - Generation Report")
        lines.append(f"{'=' * 60}")
        lines.append(f"  Status:          {status}")
        lines.append(f"  Table:           {self.table}")
        if self.model_name:
            lines.append(f"  Model:           {self.model_name}")
        lines.append(f"  Project:         {self.base_path}")
        lines.append(f"  Files written:   {len(self.written)}")
        lines.append(f"  Files skipped:   {len(self.skipped)}")
        lines.append(f"  Total bytes:     {self.total_bytes:,}")
        lines.append(f"  Total time:      {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─' * 60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<22s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        if self.records:
            lines.append(f"{'─' * 60}")
            lines.append("  Files:")
            for rec in self.records:
                mark: str = "⊘" if rec.skipped else "+"
                lines.append(f"    {mark} {rec.relative_path}")

        if self.validation_errors:
            lines.append(f"{'─' * 60}")
            lines.append(f"  Validation Errors ({len(self.validation_errors)}):")
            for err in self.validation_errors:
                lines.append(f"    ✗ {err}")

        if self.validation_warnings:
            lines.append(f"{'─' * 60}")
            lines.append(f"  Validation Warnings ({len(self.validation_warnings)}):")
            for warn in self.validation_warnings:
                lines.append(f"    ⚠ {warn}")

        if self.errors:
            lines.append(f"{'─' * 60}")
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")

        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_config_file(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationConfig:
    """
    Build a ``GenerationConfig`` from an optional YAML/JSON file.

    Keys in *overrides* whose value is not ``None`` replace the file's
    values.  A ``generator`` or ``config`` top-level key is unwrapped.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            raw: Dict[str, Any] = load_structured_file(Path(path))
        except (FileNotFoundError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc
        for key in ("generator", "config"):
            if isinstance(raw.get(key), dict):
                raw = raw[key]
                break
        data.update(raw)
        logger.info("Loaded config file: %s (%d keys).", path, len(raw))

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GenerationConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Config validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# CrudGenerator - orchestrator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """
    Scaffolds controller, model, form request and views for one table.

    Usage::

        generator = CrudGenerator(config, reader=FileSchemaReader("schema.yaml"))
        report = generator.generate("blog_posts")
        print(report.summary())

    Every collaborator can be injected; the defaults are built from
    *config* (schema source, stub directory, view stack, layout).
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        *,
        reader: Optional[SchemaReader] = None,
        confirm: Optional[ConfirmFn] = None,
        echo: EchoFn = print,
        layout_provider: Optional[LayoutProvider] = None,
        renderer: Optional[FieldRenderer] = None,
        loader: Optional[StubLoader] = None,
    ) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        self._reader: Optional[SchemaReader] = reader
        self._confirm: Optional[ConfirmFn] = confirm
        self._echo: EchoFn = echo
        self._paths: ArtifactPaths = ArtifactPaths(self._config)
        self._loader: StubLoader = loader or StubLoader(self._config.stub_path)
        self._renderer: Optional[FieldRenderer] = renderer
        self._layout_provider: LayoutProvider = layout_provider or make_layout_provider(
            self._paths, self._config.layout, self._config.stack, echo=echo
        )

        logger.debug(
            "CrudGenerator initialised: base=%s, stack=%s, layout=%s, force=%s.",
            self._paths.base,
            self._config.stack,
            self._config.layout,
            self._config.force,
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    @property
    def paths(self) -> ArtifactPaths:
        return self._paths

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate(self, table: str, route: Optional[str] = None) -> GenerationReport:
        """
        Full pipeline for *table*.

        Args:
            table: Source table name (``blog_posts``).
            route: Optional route slug overriding the derived one.

        Returns:
            GenerationReport; ``success`` is False when any step failed.
        """
        report: GenerationReport = GenerationReport(
            table=table, base_path=str(self._paths.base)
        )
        pipeline_start: float = time.perf_counter()
        writer: ArtifactWriter = ArtifactWriter(
            self._paths, confirm=self._confirm, force=self._config.force
        )

        try:
            columns: Optional[List[ColumnDescriptor]] = self._step_validate(
                table, route, report
            )
            if columns is None:
                return self._finalise_report(report, pipeline_start, writer)

            vocab: NamingVocabulary = self._step_naming(table, route, report)
            base: PlaceholderMap = build_replacements(vocab)
            kept: List[ColumnDescriptor] = filter_columns(
                columns, self._config.unwanted_columns
            )
            fields: List[FieldViewModel] = build_field_view_models(kept)

            self._step_controller(vocab, base, writer, report)
            self._step_model_and_request(vocab, base, kept, fields, writer, report)
            self._step_views(vocab, base, fields, writer, report)

            report.route_line = route_line(vocab)
            self._echo("Please add this route in web.php:")
            self._echo("")
            self._echo(report.route_line)
            self._echo("")
            report.success = True
        except (CrudGenError, OSError) as exc:
            logger.error("Generation of '%s' failed: %s", table, exc)
            report.errors.append(str(exc))
            report.success = False

        return self._finalise_report(report, pipeline_start, writer)

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        table: str,
        route: Optional[str],
        report: GenerationReport,
    ) -> Optional[List[ColumnDescriptor]]:
        """
        Config / stub checks, then the table-existence check.

        Returns the table's columns, or None when a precondition failed.
        """
        with Timer("validation") as t:
            renderer: FieldRenderer = self._get_renderer()
            result: ValidationResult = validate_full(
                self._config, self._loader, renderer, route
            )
            report.validation_errors.extend(str(e) for e in result.errors)
            report.validation_warnings.extend(str(w) for w in result.warnings)
            for warning in result.warnings:
                logger.warning("%s", warning)

            columns: Optional[List[ColumnDescriptor]] = None
            if result.is_valid:
                try:
                    columns = self._get_reader().get_columns(table)
                except TableNotFoundError as exc:
                    self._echo(str(exc))
                    report.validation_errors.append(str(exc))

        ok: bool = columns is not None
        detail: str = (
            f"{len(columns)} column(s) in '{table}'"
            if columns is not None
            else f"{len(report.validation_errors)} error(s)"
        )
        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Validate",
                success=ok,
                elapsed_seconds=t.elapsed,
                detail=detail,
            )
        )
        return columns

    # -----------------------------------------------------------------
    # Pipeline step: Naming
    # -----------------------------------------------------------------

    def _step_naming(
        self, table: str, route: Optional[str], report: GenerationReport
    ) -> NamingVocabulary:
        with Timer("naming") as t:
            vocab: NamingVocabulary = resolve_naming(
                entity_name_for_table(table), self._config, route=route, table=table
            )
        report.model_name = vocab.model_name
        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Resolve Naming",
                elapsed_seconds=t.elapsed,
                detail=f"{vocab.model_name} → /{vocab.model_route}",
            )
        )
        return vocab

    # -----------------------------------------------------------------
    # Pipeline step: Controller
    # -----------------------------------------------------------------

    def _step_controller(
        self,
        vocab: NamingVocabulary,
        base: PlaceholderMap,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> None:
        self._echo("Creating Controller ...")
        with Timer("controller") as t:
            content: str = self._loader.render("controller", base)
            record: FileRecord = writer.write(
                self._paths.controller(vocab), content, "Controller"
            )
        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Controller",
                elapsed_seconds=t.elapsed,
                detail="skipped" if record.skipped else record.relative_path,
            )
        )

    # -----------------------------------------------------------------
    # Pipeline step: Model + Request
    # -----------------------------------------------------------------

    def _step_model_and_request(
        self,
        vocab: NamingVocabulary,
        base: PlaceholderMap,
        columns: List[ColumnDescriptor],
        fields: List[FieldViewModel],
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> None:
        replace: PlaceholderMap = merge_replacements(
            base,
            {
                "{{fillable}}": fillable_list(columns),
                "{{rules}}": validation_rules(fields),
                "{{casts}}": model_casts(fields),
            },
        )

        with Timer("model") as t:
            self._echo("Creating Model ...")
            model: FileRecord = writer.write(
                self._paths.model(vocab), self._loader.render("model", replace), "Model"
            )
            self._echo("Creating Request Class ...")
            request: FileRecord = writer.write(
                self._paths.request(vocab),
                self._loader.render("request", replace),
                "Request",
            )

        written: int = sum(1 for r in (model, request) if not r.skipped)
        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Model + Request",
                elapsed_seconds=t.elapsed,
                detail=f"{written} of 2 written, {len(columns)} fillable",
            )
        )

    # -----------------------------------------------------------------
    # Pipeline step: Views
    # -----------------------------------------------------------------

    def _step_views(
        self,
        vocab: NamingVocabulary,
        base: PlaceholderMap,
        fields: List[FieldViewModel],
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> None:
        renderer: FieldRenderer = self._get_renderer()
        self._echo(f"Creating Views ({renderer.stack.capitalize()}) ...")

        with Timer("views") as t:
            replace: PlaceholderMap = merge_replacements(
                base, renderer.render_blocks(fields, base)
            )

            if not self._layout_provider.ensure_layout():
                raise LayoutBootstrapError(
                    f"Unable to create layout '{self._config.layout}'. "
                    "Please create it manually"
                )

            written: int = 0
            for view in VIEW_NAMES:
                content: str = self._loader.render(renderer.view_stub(view), replace)
                record: FileRecord = writer.write(
                    self._paths.view(vocab, view), content, f"View '{view}'"
                )
                written += 0 if record.skipped else 1

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Views",
                elapsed_seconds=t.elapsed,
                detail=f"{written} of {len(VIEW_NAMES)} written, {len(fields)} field(s)",
            )
        )

    # -----------------------------------------------------------------
    # Collaborators
    # -----------------------------------------------------------------

    def _get_renderer(self) -> FieldRenderer:
        if self._renderer is None:
            self._renderer = get_renderer(self._config.stack, self._loader)
        return self._renderer

    def _get_reader(self) -> SchemaReader:
        if self._reader is None:
            self._reader = make_schema_reader(
                self._config.database_url, self._config.schema_file
            )
        return self._reader

    # -----------------------------------------------------------------
    # Finalisation
    # -----------------------------------------------------------------

    @staticmethod
    def _finalise_report(
        report: GenerationReport,
        pipeline_start: float,
        writer: ArtifactWriter,
    ) -> GenerationReport:
        report.records = writer.records
        report.total_elapsed_seconds = time.perf_counter() - pipeline_start
        if report.validation_errors:
            report.success = False

        if report.success:
            logger.info(
                "Generation of '%s' complete: %d written, %d skipped in %.3fs.",
                report.table,
                len(report.written),
                len(report.skipped),
                report.total_elapsed_seconds,
            )
        else:
            logger.error(
                "Generation of '%s' FAILED: %d validation error(s), %d error(s).",
                report.table,
                len(report.validation_errors),
                len(report.errors),
            )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "GenerationStepMetric",
    "GenerationReport",
    "load_config_file",
    "CrudGenerator",
]

logger.debug("crudgen.generator loaded.")
