"""Command-line entry point.

Usage::

    vclight-create my-app
    vclight-create my-app --template blank --plugin prettier --yes
    python -m vclight_create my-app --pin vclight=2.0.0
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from rich.markup import escape
from rich.prompt import Confirm, Prompt

from vclight_create.config import Config
from vclight_create.errors import (
    InvalidNameError,
    RenderError,
    ResolutionError,
    ScaffoldError,
)
from vclight_create.scaffolder.generator import (
    KNOWN_PLUGINS,
    KNOWN_TEMPLATES,
    ProjectGenerator,
    ProjectOptions,
)
from vclight_create.utils import (
    console,
    create_progress,
    format_duration,
    is_valid_folder_name,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vclight-create",
        description="Create a new VCLight project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  vclight-create my-app\n"
            "  vclight-create my-app --template blank --plugin prettier --yes\n"
            "  vclight-create my-app --pin vclight=2.0.0\n"
        ),
    )
    parser.add_argument("name", help="Name of the project folder to create")
    parser.add_argument(
        "--template", "-t",
        choices=KNOWN_TEMPLATES,
        default=None,
        help="Project template (prompted when omitted)",
    )
    parser.add_argument(
        "--plugin", "-p",
        dest="plugins",
        action="append",
        choices=KNOWN_PLUGINS,
        default=None,
        help="Plugin to include; may be repeated (prompted when omitted)",
    )
    parser.add_argument(
        "--pin",
        dest="pins",
        action="append",
        default=[],
        metavar="PACKAGE=VERSION",
        help="Write an exact version for PACKAGE instead of the latest one",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Directory to create the project in (default: current directory)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; use defaults for anything not given on the command line",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print every file as it is written",
    )
    return parser


def parse_pins(pins: list[str]) -> dict[str, str]:
    """Parse ``PACKAGE=VERSION`` strings into a mapping.

    The split is on the last ``=`` so scoped names such as ``@vercel/node``
    work unchanged.

    Raises:
        ValueError: If an entry has no ``=`` or an empty side.
    """
    result: dict[str, str] = {}
    for pin in pins:
        package, sep, version = pin.rpartition("=")
        if not sep or not package or not version:
            raise ValueError(f"Invalid pin {pin!r}, expected PACKAGE=VERSION")
        result[package] = version
    return result


def prompt_options(
    args: argparse.Namespace, config: Config, interactive: bool
) -> tuple[str, list[str]]:
    """Ask for whatever the command line left open."""
    descriptions = config.templates.descriptions
    template = args.template
    if template is None:
        if interactive:
            for key in KNOWN_TEMPLATES:
                console.print(f"  [cyan]{key}[/cyan]  {descriptions.get(key, key)}")
            template = Prompt.ask(
                "Which template would you like to use?",
                choices=list(KNOWN_TEMPLATES),
                default=KNOWN_TEMPLATES[0],
                console=console,
            )
        else:
            template = KNOWN_TEMPLATES[0]

    plugins = args.plugins
    if plugins is None:
        plugins = []
        if interactive:
            for key in KNOWN_PLUGINS:
                if Confirm.ask(
                    f"Use {descriptions.get(key, key)}?", default=False, console=console
                ):
                    plugins.append(key)
    return template, plugins


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``vclight-create``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not is_valid_folder_name(args.name):
        print_error(escape(str(InvalidNameError(args.name))))
        sys.exit(InvalidNameError.exit_code)

    try:
        pinned = parse_pins(args.pins)
    except ValueError as exc:
        parser.error(str(exc))

    config = Config.from_env()
    print_info(f"Creating project [cyan]{escape(args.name)}[/cyan]")
    interactive = not args.yes and sys.stdin.isatty()
    template, plugins = prompt_options(args, config, interactive)

    options = ProjectOptions(name=args.name, template=template, plugins=plugins, pinned=pinned)

    def _report(path: Path) -> None:
        if args.verbose:
            console.print(f"  [green]+[/green] {escape(str(path))}")

    generator = ProjectGenerator(options, config=config, on_file_written=_report)
    started = time.monotonic()
    try:
        with create_progress() as progress:
            progress.add_task("Creating files...", total=None)
            result = asyncio.run(generator.generate(args.output))
    except ScaffoldError as exc:
        _report_failure(exc)
        sys.exit(exc.exit_code)

    print_success("Created successfully.")
    print_summary_table(
        {
            "Project": str(result.project_root),
            "Template": options.template,
            "Plugins": ", ".join(options.plugins) or "none",
            "Files": str(len(result.files_written)),
            "Elapsed": format_duration(time.monotonic() - started),
        },
        title="vclight-create",
    )
    console.print("run commands:")
    console.print(f"[green]cd {escape(args.name)}[/green]")
    console.print("[green]npm install[/green]")


def _report_failure(exc: ScaffoldError) -> None:
    if isinstance(exc, ResolutionError):
        print_error("Can't resolve package versions.")
        for package, reason in sorted(exc.failures.items()):
            print_warning(f"  {escape(package)}: {escape(reason)}")
    elif isinstance(exc, RenderError):
        print_error("Can't render templates.")
        for path, reason in exc.failures.items():
            print_warning(f"  {escape(str(path))}: {escape(reason)}")
    else:
        print_error(escape(str(exc)))


if __name__ == "__main__":
    main()
