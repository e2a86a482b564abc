"""
Generation pipeline.

Analyzes models from a host, runs the generators in order and writes the
results through a ``FileWriter``. Batch runs never stop on a single file
failure: every planned file gets a ``FileResult`` and the run ends with a
``BatchSummary``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable

from .analyzers import ModelAnalyzer, RouteAnalyzer
from .analyzers.base import AnalyzerError
from .codegen.core.config import FlutterConfig
from .codegen.core.generator import CodeGenerator
from .codegen.core.schema import ModelDescriptor, RouteAnalysis
from .codegen.flutter import SCREEN_TYPES, WIDGET_TYPES
from .codegen.registry import GeneratorRegistry, create_default_registry
from .hosts.interface import Host
from .hosts.manifest import ManifestError
from .logging_config import get_logger

logger = get_logger(__name__)

COMPONENTS = ("model", "service", "widgets", "screens")


def _short_name(name: str) -> str:
    return re.split(r"[\\.:]", name)[-1]


class FileStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileResult:
    """Outcome of one planned file."""

    path: str
    status: FileStatus
    component: str = ""
    model: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not FileStatus.FAILED


@dataclass
class BatchSummary:
    """Aggregate of every ``FileResult`` of a run."""

    results: list[FileResult] = field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.results.append(result)

    def extend(self, results: Iterable[FileResult]) -> None:
        self.results.extend(results)

    def _with_status(self, status: FileStatus) -> list[FileResult]:
        return [r for r in self.results if r.status is status]

    @property
    def succeeded(self) -> list[FileResult]:
        return self._with_status(FileStatus.WRITTEN)

    @property
    def skipped(self) -> list[FileResult]:
        return self._with_status(FileStatus.SKIPPED)

    @property
    def failed(self) -> list[FileResult]:
        return self._with_status(FileStatus.FAILED)

    @property
    def exit_code(self) -> int:
        """1 if any file failed, else 0."""
        return 1 if self.failed else 0


class FileWriter:
    """Writes generated files with an overwrite/skip contract.

    An existing file is overwritten when ``force`` is set, or when the
    ``confirm`` callback accepts the path. Otherwise it is skipped.
    """

    def __init__(
        self,
        force: bool = False,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.force = force
        self.confirm = confirm

    def should_write(self, path: Path) -> bool:
        if not path.exists() or self.force:
            return True
        if self.confirm is None:
            return False
        return bool(self.confirm(str(path)))

    def write(self, path: str | Path, content: str) -> FileStatus:
        """
        Write ``content`` to ``path``, creating parent directories.

        Raises:
            OSError: The file or its directory cannot be written.
        """
        target = Path(path)
        if not self.should_write(target):
            logger.info(f"Skipped: {target}")
            return FileStatus.SKIPPED

        if not target.parent.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {target.parent}")
        target.write_text(content, encoding="utf-8")
        logger.info(f"Generated: {target}")
        return FileStatus.WRITTEN


@dataclass
class PlannedFile:
    """One file a run intends to produce."""

    component: str
    path: str
    render: Callable[[], str]
    model: str = ""


class GenerationPipeline:
    """Runs analysis and generation against one backend host."""

    def __init__(
        self,
        host: Host,
        config: FlutterConfig | None = None,
        writer: FileWriter | None = None,
        registry: GeneratorRegistry | None = None,
    ) -> None:
        self.host = host
        self.config = config or FlutterConfig()
        self.writer = writer or FileWriter()
        self.registry = registry or create_default_registry()
        self.model_analyzer = ModelAnalyzer(
            host.schema, self.config, resolver=host.resolve_model
        )
        self.route_analyzer = RouteAnalyzer(host)
        self._generators: dict[str, CodeGenerator] = {}
        self._route_analysis: RouteAnalysis | None = None

    def generator(self, component: str) -> CodeGenerator:
        if component not in self._generators:
            self._generators[component] = self.registry.create_generator(
                component, self.config
            )
        return self._generators[component]

    # Models

    def is_excluded(self, name: str) -> bool:
        """Match ``excluded_models`` entries by full or unqualified name."""
        excluded = {_short_name(entry) for entry in self.config.excluded_models}
        return _short_name(name) in excluded

    def available_models(self) -> list[str]:
        """Discovered models minus ``excluded_models``."""
        return [name for name in self.host.discover_models() if not self.is_excluded(name)]

    def route_analysis(self) -> RouteAnalysis:
        if self._route_analysis is None:
            try:
                self._route_analysis = self.route_analyzer.analyze()
            except AnalyzerError as e:
                logger.warning(f"Route analysis unavailable: {e}")
                self._route_analysis = RouteAnalysis()
        return self._route_analysis

    def analyze(self, model_ref: Any, with_routes: bool = False) -> ModelDescriptor:
        """
        Analyze a model and optionally attach the routes of its resource.

        Raises:
            UnresolvableModelError: The reference does not name a model.
        """
        descriptor = self.model_analyzer.analyze_model(model_ref)
        if with_routes:
            routes = self.route_analysis().routes_for_model(descriptor.class_name)
            logger.debug(f"{descriptor.class_name}: {len(routes)} routes attached")
            descriptor = descriptor.with_routes(routes)
        return descriptor

    # Planning

    def plan_base(self) -> list[PlannedFile]:
        api_base = self.generator("api_base")
        return [PlannedFile("api_base", api_base.get_output_path(), api_base.generate)]

    def plan_model(
        self,
        descriptor: ModelDescriptor,
        components: Iterable[str] = COMPONENTS,
    ) -> list[PlannedFile]:
        """Files to produce for one model, in generation order."""
        components = set(components)
        name = descriptor.class_name
        plan: list[PlannedFile] = []

        if "model" in components:
            model = self.generator("model")
            plan.append(
                PlannedFile("model", model.get_output_path(name), lambda: model.generate(descriptor), name)
            )
        if "service" in components:
            service = self.generator("service")
            plan.append(
                PlannedFile("service", service.get_output_path(name), lambda: service.generate(descriptor), name)
            )
        if "widgets" in components:
            widget = self.generator("widget")
            for widget_type in WIDGET_TYPES:
                plan.append(
                    PlannedFile(
                        f"widget:{widget_type}",
                        widget.get_output_path(widget.output_name(descriptor, widget_type)),
                        lambda t=widget_type: widget.generate(descriptor, {"widget_type": t}),
                        name,
                    )
                )
        if "screens" in components:
            screen = self.generator("screen")
            for screen_type in SCREEN_TYPES:
                plan.append(
                    PlannedFile(
                        f"screen:{screen_type}",
                        screen.get_output_path(screen.output_name(descriptor, screen_type)),
                        lambda t=screen_type: screen.generate(descriptor, {"screen_type": t}),
                        name,
                    )
                )
        return plan

    # Execution

    def execute(self, planned: PlannedFile) -> FileResult:
        """Render and write one planned file; failures are recorded, not raised."""
        try:
            status = self.writer.write(planned.path, planned.render())
        except Exception as e:
            logger.error(f"Failed to generate {planned.path}: {e}")
            return FileResult(planned.path, FileStatus.FAILED, planned.component, planned.model, str(e))
        return FileResult(planned.path, status, planned.component, planned.model)

    def run(
        self,
        plan: list[PlannedFile],
        summary: BatchSummary | None = None,
        on_progress: Callable[[FileResult], None] | None = None,
    ) -> BatchSummary:
        summary = summary or BatchSummary()
        for planned in plan:
            result = self.execute(planned)
            summary.add(result)
            if on_progress is not None:
                on_progress(result)
        return summary

    def ensure_base_api_service(self) -> FileResult | None:
        """Generate ``api_service.dart`` unless it already exists."""
        planned = self.plan_base()[0]
        if Path(planned.path).exists():
            return None
        return self.execute(planned)

    def generate_feature(
        self,
        model_ref: Any,
        components: Iterable[str] = COMPONENTS,
        summary: BatchSummary | None = None,
        on_progress: Callable[[FileResult], None] | None = None,
        with_routes: bool = False,
    ) -> BatchSummary:
        """
        Generate every requested component for one model.

        A model that cannot be analyzed is recorded as one failed entry.
        ``with_routes`` attaches the resource routes so the service gets
        custom methods.
        """
        summary = summary or BatchSummary()
        try:
            descriptor = self.analyze(model_ref, with_routes=with_routes)
        except (AnalyzerError, ManifestError) as e:
            logger.error(f"Cannot analyze {model_ref}: {e}")
            result = FileResult(str(model_ref), FileStatus.FAILED, "analysis", str(model_ref), str(e))
            summary.add(result)
            if on_progress is not None:
                on_progress(result)
            return summary
        return self.run(self.plan_model(descriptor, components), summary, on_progress)

    def generate_all(
        self,
        models: Iterable[str] | None = None,
        components: Iterable[str] = COMPONENTS,
        on_progress: Callable[[FileResult], None] | None = None,
    ) -> BatchSummary:
        """Generate the shared transport and every component for each model."""
        summary = BatchSummary()
        targets = list(models) if models is not None else self.available_models()
        components = list(components)
        if "service" in components:
            summary = self.run(self.plan_base(), summary, on_progress)
        for model in targets:
            if self.is_excluded(model):
                logger.warning(f"Model '{model}' is excluded from generation")
                continue
            self.generate_feature(model, components, summary, on_progress)
        return summary

    def estimate_files(
        self,
        model_count: int,
        components: Iterable[str] = COMPONENTS,
        include_base: bool = True,
    ) -> int:
        """Planned file count: per-model components plus the shared transport.

        The transport is only counted when services are generated.
        """
        components = set(components)
        per_model = {"model": 1, "service": 1, "widgets": len(WIDGET_TYPES), "screens": len(SCREEN_TYPES)}
        base = 1 if include_base and "service" in components else 0
        return model_count * sum(per_model[c] for c in components) + base
