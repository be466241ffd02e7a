"""
Command-line interface for factorio-codegen.

Subcommands:

- ``script``: generate the Lua extraction script (``prototypes.lua``)
- ``structs``: generate the pydantic declarations for the captured output
- ``runtime``: write the ``export.lua`` runtime library the script loads
- ``parse``: turn captured script output into JSON
- ``backends``: list the registered backends
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .codegen import (
    ConfigError,
    GeneratorConfig,
    GeneratorError,
    RegistryError,
    generate_from_api,
    get_registry,
    load_config,
    parse_api,
)
from .codegen.core.config import validate_config
from .codegen.core.templates import TemplateError
from .codegen.languages.lua import LuaGenerator, parse_export_output
from .codegen.registry import list_all_language_info
from .logging_config import get_logger, setup_logging
from .utils import SchemaLoaderError, api_docs_url, load_api_document

logger = get_logger(__name__)

# Diagnostics go to stderr so generated code can be piped from stdout
console = Console(stderr=True)

SUBCOMMAND_BACKENDS = {
    "script": "lua",
    "structs": "python",
}


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="factorio-codegen",
        description="Generate Factorio prototype exporters from runtime-api.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  factorio-codegen script runtime-api.json -o prototypes.lua
  factorio-codegen structs runtime-api.json --root-suffix _prototypes -o models.py
  factorio-codegen script --version 1.1.62 --icons
  factorio-codegen runtime -o export.lua
  factorio-codegen parse factorio-stdout.txt --icons -o prototypes.json
        """.strip(),
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: FACTORIO_CODEGEN_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    for command, help_text in (
        ("script", "Generate the Lua extraction script"),
        ("structs", "Generate pydantic models for the exported data"),
    ):
        sub = subparsers.add_parser(command, help=help_text, description=help_text)
        _add_schema_args(sub)
        _add_output_args(sub)
        sub.set_defaults(func=_handle_generate)

    runtime = subparsers.add_parser(
        "runtime", help="Write the Lua runtime library used by the script"
    )
    runtime.add_argument("--output", "-o", help="Output file (default: stdout)")
    runtime.add_argument("--config", help="Configuration file path (JSON)")
    runtime.set_defaults(func=_handle_runtime)

    parse = subparsers.add_parser(
        "parse", help="Convert captured script output to JSON"
    )
    parse.add_argument(
        "file", nargs="?", help="Captured output file (default: standard input)"
    )
    parse.add_argument("--output", "-o", help="Output file (default: stdout)")
    parse.add_argument(
        "--icons", action="store_true", help="Merge the <ICONS> section into prototypes"
    )
    parse.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parse.set_defaults(func=_handle_parse)

    backends = subparsers.add_parser("backends", help="List registered backends")
    backends.set_defaults(func=_handle_backends)

    return parser


def _add_schema_args(parser: argparse.ArgumentParser):
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("file", nargs="?", help="Path to runtime-api.json")
    input_group.add_argument("--url", help="URL to fetch runtime-api.json from")
    input_group.add_argument(
        "--version",
        dest="api_version",
        metavar="VERSION",
        help="Fetch runtime-api.json for a game version from the API docs site",
    )
    parser.add_argument(
        "--timeout", type=int, default=30, help="Request timeout in seconds"
    )


def _add_output_args(parser: argparse.ArgumentParser):
    parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument("--locale", help="Locale for localised strings (default: en)")
    parser.add_argument(
        "--icons", action="store_true", help="Export icon paths alongside prototypes"
    )
    parser.add_argument(
        "--root-suffix",
        metavar="SUFFIX",
        help="Only export root attributes ending with SUFFIX (e.g. _prototypes)",
    )
    parser.add_argument("--root-class", help="Class holding the root attributes")
    parser.add_argument(
        "--no-comments", action="store_true", help="Don't add comments to generated code"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata"
    )


def _build_config(args: argparse.Namespace, language: str) -> GeneratorConfig:
    """Merge the config file with command-line overrides."""
    overrides: dict[str, Any] = {}

    if getattr(args, "locale", None):
        overrides["locale"] = args.locale
    if getattr(args, "icons", False):
        overrides["export_icons"] = True
    if getattr(args, "root_suffix", None):
        overrides["root_attribute_suffix"] = args.root_suffix
    if getattr(args, "root_class", None):
        overrides["root_class"] = args.root_class
    if getattr(args, "no_comments", False):
        overrides["add_comments"] = False

    config = load_config(language, custom_config=overrides, config_file=args.config)

    problems = validate_config(config, language)
    if problems:
        raise ConfigError("; ".join(problems))
    return config


def _load_schema(args: argparse.Namespace):
    if args.api_version:
        url = api_docs_url(args.api_version)
    else:
        url = args.url
    source, document = load_api_document(
        file_path=args.file, url=url, timeout=args.timeout
    )
    logger.info(f"Loaded API document from {source}")
    return parse_api(document)


def _write_output(text: str, output: str | None, what: str):
    if output:
        path = Path(output)
        path.write_text(text, encoding="utf-8")
        console.print(f"[green]✓[/green] {what} saved to [cyan]{path}[/cyan]")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def _handle_generate(args: argparse.Namespace) -> int:
    language = get_registry().resolve_name(SUBCOMMAND_BACKENDS[args.command])
    config = _build_config(args, language)
    api = _load_schema(args)

    result = generate_from_api(api, language, config)

    what = "Lua script" if language == "lua" else "Python models"
    _write_output(result.code, args.output, what)

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        console.print()
        console.print(metadata_table)

    if result.warnings:
        console.print(f"\n[yellow]⚠️  {len(result.warnings)} attribute(s) omitted[/yellow]")
        if args.verbose:
            for warning in result.warnings:
                console.print(f"  [yellow]•[/yellow] {escape(warning)}")

    return 0


def _handle_runtime(args: argparse.Namespace) -> int:
    config = load_config("lua", config_file=args.config)
    generator = LuaGenerator(config)
    _write_output(generator.render_runtime(), args.output, "Lua runtime")
    return 0


def _handle_parse(args: argparse.Namespace) -> int:
    if args.file:
        try:
            output = Path(args.file).read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaLoaderError(f"Error reading file {args.file}: {e}") from e
    else:
        output = sys.stdin.read()

    data = parse_export_output(output, export_icons=args.icons)
    text = json.dumps(data, indent=args.indent, ensure_ascii=False) + "\n"
    _write_output(text, args.output, "Prototype data")
    return 0


def _handle_backends(args: argparse.Namespace) -> int:
    language_info = list_all_language_info()

    table = Table(title="📋 Supported Backends", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Backend", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print(
        Panel(
            "[bold]Script:[/bold] factorio-codegen script [dim]runtime-api.json[/dim]\n"
            "[bold]Models:[/bold] factorio-codegen structs [dim]runtime-api.json[/dim]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``factorio-codegen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)
    logger.debug(f"Running command: {args.command}")

    try:
        return args.func(args)
    except (
        GeneratorError,
        ConfigError,
        RegistryError,
        SchemaLoaderError,
        TemplateError,
    ) as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1
    except OSError as e:
        console.print(f"[red]✗ Failed to write output:[/red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
