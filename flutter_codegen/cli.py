"""
Command handlers for the ``flutter-codegen`` CLI.

Each subcommand builds a host, a configuration and a
``GenerationPipeline``, runs it, and reports through a rich console.
"""

from __future__ import annotations

import argparse
from typing import Any, Callable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm
from rich.table import Table

from .analyzers.base import AnalyzerError
from .codegen.core.config import ConfigError, FlutterConfig, load_config
from .codegen.core.generator import GeneratorError
from .codegen.core.templates import TemplateError
from .codegen.registry import RegistryError
from .hosts.manifest import ManifestError, ManifestHost
from .logging_config import get_logger
from .pipeline import COMPONENTS, BatchSummary, FileResult, FileStatus, FileWriter, GenerationPipeline

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


HANDLED_ERRORS = (
    CLIError,
    ConfigError,
    ManifestError,
    AnalyzerError,
    GeneratorError,
    TemplateError,
    RegistryError,
)

STATUS_STYLES = {
    FileStatus.WRITTEN: "[green]✓ written[/green]",
    FileStatus.SKIPPED: "[yellow]↷ skipped[/yellow]",
    FileStatus.FAILED: "[red]✗ failed[/red]",
}


class CLIHandler:
    """Handle the generation subcommands."""

    def __init__(
        self,
        console: Console | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        """
        Args:
            console: Console used for all output.
            confirm: Asks whether a question should be answered yes. Defaults
                to a rich ``Confirm`` prompt.
        """
        self.console = console or Console()
        self.confirm = confirm or self._ask

    def _ask(self, question: str) -> bool:
        return Confirm.ask(question, default=False, console=self.console)

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the subcommand named by ``args.command``.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        handlers = {
            "generate-model": self.generate_model,
            "generate-service": self.generate_service,
            "generate-feature": self.generate_feature,
            "generate-all": self.generate_all,
            "list-models": self.list_models,
        }
        handler = handlers.get(args.command)
        if handler is None:
            self.console.print(f"[red]✗ Unknown command:[/red] {args.command}")
            return 1

        try:
            pipeline = self.build_pipeline(args)
            return handler(pipeline, args)
        except HANDLED_ERRORS as e:
            logger.debug("Command failed", exc_info=True)
            self.console.print(f"[red]✗ Error:[/red] {e}")
            return 1

    # Setup

    def build_config(self, args: argparse.Namespace) -> FlutterConfig:
        overrides: dict[str, Any] = {}
        if getattr(args, "output", None):
            overrides["output"] = {"base_path": args.output}
        return load_config(custom_config=overrides or None, config_file=getattr(args, "config", None))

    def build_host(self, args: argparse.Namespace, config: FlutterConfig):
        manifest = getattr(args, "manifest", None)
        database_url = getattr(args, "database_url", None)
        models_module = getattr(args, "models_module", None)
        timeout = config.api.timeout

        if database_url or models_module:
            if not (database_url and models_module):
                raise CLIError("--database-url and --models-module must be given together")
            from .hosts.sqla import SQLAlchemyHost

            routes = ManifestHost.load(manifest, timeout).get_routes() if manifest else None
            return SQLAlchemyHost.from_url(database_url, models_module, routes=routes)

        if manifest:
            return ManifestHost.load(manifest, timeout)

        raise CLIError(
            "No backend given: use --manifest FILE|URL or "
            "--database-url URL --models-module pkg.mod:Base"
        )

    def build_pipeline(self, args: argparse.Namespace) -> GenerationPipeline:
        config = self.build_config(args)
        host = self.build_host(args, config)
        writer = FileWriter(
            force=getattr(args, "force", False),
            confirm=lambda path: self.confirm(f"File {path} already exists. Overwrite?"),
        )
        return GenerationPipeline(host, config, writer)

    # Commands

    def generate_model(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> int:
        self.console.print(f"🎯 Generating Dart model for [bold]{args.name}[/bold]")
        summary = pipeline.generate_feature(args.name, ("model",))
        return self.report(summary)

    def generate_service(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> int:
        self.console.print(f"🔌 Generating API service for [bold]{args.name}[/bold]")
        summary = BatchSummary()
        base = pipeline.ensure_base_api_service()
        if base is not None:
            summary.add(base)
        pipeline.generate_feature(
            args.name, ("service",), summary, with_routes=args.with_routes
        )
        return self.report(summary)

    def generate_feature(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> int:
        components = self.selected_components(args)
        if not components:
            raise CLIError("Every component is skipped; nothing to generate")

        self.console.print(f"🚀 Generating feature for [bold]{args.name}[/bold]")
        summary = BatchSummary()
        if "service" in components:
            base = pipeline.ensure_base_api_service()
            if base is not None:
                summary.add(base)

        total = pipeline.estimate_files(1, components, include_base=False)
        with self._progress() as progress:
            task = progress.add_task("Generating", total=total)
            pipeline.generate_feature(
                args.name,
                components,
                summary,
                on_progress=lambda result: self._advance(progress, task, result),
            )
        return self.report(summary)

    def generate_all(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> int:
        components = self.selected_components(args)
        if not components:
            raise CLIError("Every component is skipped; nothing to generate")

        models = self.selected_models(pipeline, args)
        if not models:
            self.console.print("[yellow]⚠️ No models found to generate.[/yellow]")
            return 0

        self.show_plan(pipeline, models, components)
        if not args.yes and not self.confirm("Do you want to continue with the generation?"):
            self.console.print("Generation cancelled.")
            return 0

        total = pipeline.estimate_files(len(models), components)
        with self._progress() as progress:
            task = progress.add_task("Generating", total=total)
            summary = pipeline.generate_all(
                models,
                components,
                on_progress=lambda result: self._advance(progress, task, result),
            )
            progress.update(task, completed=total)
        return self.report(summary)

    def list_models(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> int:
        models = pipeline.host.discover_models()
        if not models:
            self.console.print("[yellow]⚠️ No models found[/yellow]")
            return 0

        table = Table(title="📋 Available Models", box=box.ROUNDED, title_style="bold cyan")
        table.add_column("Model", style="bold green", no_wrap=True)
        table.add_column("Status", style="cyan")
        for name in models:
            status = "[dim]excluded[/dim]" if pipeline.is_excluded(name) else "available"
            table.add_row(name, status)
        self.console.print(table)
        return 0

    # Helpers

    @staticmethod
    def selected_components(args: argparse.Namespace) -> tuple[str, ...]:
        return tuple(
            component
            for component in COMPONENTS
            if not getattr(args, f"skip_{component}", False)
        )

    def selected_models(self, pipeline: GenerationPipeline, args: argparse.Namespace) -> list[str]:
        requested = getattr(args, "models", None)
        if not requested:
            return pipeline.available_models()

        names = [name.strip() for name in requested.split(",") if name.strip()]
        valid = []
        for name in names:
            if pipeline.is_excluded(name):
                self.console.print(f"[yellow]⚠️ Model '{name}' is excluded from generation.[/yellow]")
                continue
            valid.append(name)
        return valid

    def show_plan(self, pipeline: GenerationPipeline, models: list[str], components: tuple[str, ...]) -> None:
        lines = [f"[bold]Models to process:[/bold] {len(models)}"]
        lines.extend(f"  • {name}" for name in models)
        lines.append(f"[bold]Components:[/bold] {', '.join(components)}")
        lines.append(f"[bold]Estimated files:[/bold] {pipeline.estimate_files(len(models), components)}")
        lines.append(f"[bold]Output:[/bold] {pipeline.config.output.base_path}")
        self.console.print(Panel("\n".join(lines), title="🗂️ Generation Plan", border_style="blue"))

    def _progress(self) -> Progress:
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=self.console,
            transient=True,
        )

    @staticmethod
    def _advance(progress: Progress, task: Any, result: FileResult) -> None:
        progress.update(task, advance=1, description=f"{result.component} {result.model}".strip())

    def report(self, summary: BatchSummary) -> int:
        """Print the summary table and return the exit code."""
        if summary.results:
            table = Table(title="📊 Generation Summary", box=box.SIMPLE, header_style="bold cyan")
            table.add_column("File", style="dim")
            table.add_column("Status")
            table.add_column("Reason", style="red")
            for result in summary.results:
                table.add_row(result.path, STATUS_STYLES[result.status], result.reason)
            self.console.print(table)

        self.console.print(
            f"[green]Succeeded: {len(summary.succeeded)}[/green]  "
            f"[yellow]Skipped: {len(summary.skipped)}[/yellow]  "
            f"[red]Failed: {len(summary.failed)}[/red]"
        )
        if summary.exit_code == 0:
            self.console.print("🎉 [green]Generation complete[/green]")
        return summary.exit_code
