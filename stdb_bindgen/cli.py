"""
Command-line interface for binding generation.

Provides the ``generate``, ``build`` and ``languages`` subcommands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen import generate_code, get_generator, list_supported_languages
from .codegen.core.config import ConfigError, get_config_manager
from .codegen.core.schema import SchemaError
from .codegen.languages.go.toolchain import ToolchainError, build_go, gofmt
from .codegen.registry import (
    RegistryError,
    get_language_info,
    get_registry,
    is_language_supported,
)
from .logging_config import get_logger, setup_logging
from .utils import SchemaLoadError, load_module_schema, write_output_files

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="stdb-bindgen",
        description="Generate client bindings from a SpacetimeDB module schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stdb-bindgen generate --schema module.json --out-dir module_bindings
  stdb-bindgen generate --url http://localhost:3000/v1/database/app/schema --dry-run
  stdb-bindgen build --project-path ./server
  stdb-bindgen languages
        """.strip(),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _add_generate_parser(subparsers)
    _add_build_parser(subparsers)
    _add_languages_parser(subparsers)
    return parser


def _add_logging_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logs and metadata"
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")


def _add_generate_parser(subparsers):
    parser = subparsers.add_parser(
        "generate",
        help="Generate client bindings from a module schema",
        description="Generate client bindings from a module schema",
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("--schema", metavar="FILE", help="Module schema JSON file")
    input_group.add_argument("--url", help="URL to fetch the module schema from")

    parser.add_argument(
        "--lang", "-l", default="go", help="Target language (default: go)"
    )
    parser.add_argument(
        "--out-dir",
        "-o",
        default="module_bindings",
        metavar="DIR",
        help="Output directory (default: module_bindings)",
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument("--package-name", metavar="NAME", help="Generated package name")
    parser.add_argument(
        "--include-private",
        action="store_true",
        help="Also emit private tables, reducers and procedures",
    )
    parser.add_argument(
        "--format",
        action="store_true",
        help="Run gofmt on the written files (Go only)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be written without writing them",
    )
    _add_logging_args(parser)
    parser.set_defaults(func=handle_generate)


def _add_build_parser(subparsers):
    parser = subparsers.add_parser(
        "build",
        help="Build a Go module to a WASI binary",
        description="Build a Go module to build/module.wasm for the WASI target",
    )
    parser.add_argument(
        "--project-path",
        default=".",
        metavar="DIR",
        help="Module directory (default: current directory)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Debug build (skips -trimpath)"
    )
    _add_logging_args(parser)
    parser.set_defaults(func=handle_build)


def _add_languages_parser(subparsers):
    parser = subparsers.add_parser("languages", help="List supported target languages")
    _add_logging_args(parser)
    parser.set_defaults(func=handle_languages)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.package_name:
        overrides["package_name"] = args.package_name
    if args.include_private:
        overrides["include_private"] = True
    return overrides


def handle_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    if not _validate_language(args.lang):
        return 1
    language = get_registry().resolve_language(args.lang)

    try:
        generator = get_generator(language, _load_generator_config(args, language))
    except (ConfigError, RegistryError) as e:
        raise CLIError(f"Configuration error: {e}") from e

    try:
        source, module = load_module_schema(file_path=args.schema, url=args.url)
    except (FileNotFoundError, SchemaLoadError) as e:
        raise CLIError(str(e)) from e

    console.print(f"📄 Loaded: {source}")

    with console.status(f"[green]Generating {language} bindings..."):
        result = generate_code(generator, module)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        if isinstance(result.exception, SchemaError):
            console.print("[dim]The module schema is inconsistent.[/dim]")
        return 1

    if args.dry_run:
        _print_file_table(result.filenames, Path(args.out_dir))
    else:
        try:
            written = write_output_files(result.files, args.out_dir)
        except OSError as e:
            raise CLIError(f"Failed to write bindings to {args.out_dir}: {e}") from e
        console.print(
            f"[green]✓[/green] Wrote {len(written)} file(s) to [cyan]{args.out_dir}[/cyan]"
        )
        if args.format:
            _format_files(generator.language_name, Path(args.out_dir), written)

    if args.verbose and result.metadata:
        _print_metadata(result.metadata)

    # Show warnings with rich formatting
    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    return 0


def _load_generator_config(args: argparse.Namespace, language: str):
    manager = get_config_manager()
    config = manager.get_config(
        language, custom_config=_build_overrides(args), config_file=args.config
    )
    for warning in manager.validate_config(config, language):
        logger.warning("Config: %s", warning)
    return config


def _format_files(language: str, out_dir: Path, written: Sequence[Path]):
    if language != "go":
        console.print(f"[yellow]⚠️  --format is not supported for {language}[/yellow]")
        return
    formatted = gofmt(out_dir, written)
    console.print(f"[green]✓[/green] Formatted {len(formatted)} file(s) with gofmt")


def _print_file_table(filenames: Sequence[str], out_dir: Path):
    table = Table(
        title=f"📋 Files for {out_dir} (dry run)",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("File", style="green", no_wrap=True)

    for idx, filename in enumerate(filenames, start=1):
        table.add_row(str(idx), filename)

    console.print(table)


def _print_metadata(metadata: dict[str, Any]):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def handle_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    project_path = Path(args.project_path)
    if not project_path.is_dir():
        raise CLIError(f"Project directory not found: {project_path}")

    with console.status("[green]Building Go module for WASI..."):
        artifact = build_go(project_path, debug=args.debug)

    console.print(f"[green]✓[/green] Built [cyan]{artifact}[/cyan]")
    return 0


def handle_languages(args: argparse.Namespace) -> int:
    """List supported languages with details."""
    languages = list_supported_languages()
    if not languages:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in languages:
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {language}", info["file_extension"], info["class"], aliases)

    console.print(table)
    console.print(
        Panel(
            "[bold]Usage:[/bold] stdb-bindgen generate --schema [dim]module.json[/dim] "
            "--lang [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _validate_language(language: str) -> bool:
    """Validate that a language is supported."""
    if not is_language_supported(language):
        supported = list_supported_languages()
        console.print(f"[red]✗ Unsupported language '{language}'[/red]")
        console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the command-line interface.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    setup_logging("DEBUG" if args.verbose else "WARNING", args.log_file)
    logger.debug("Running command: %s", args.command)

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except ToolchainError as e:
        console.print(f"[red]✗ Toolchain error:[/red] {e}")
        return 1
