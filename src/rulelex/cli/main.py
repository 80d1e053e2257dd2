"""CLI entry point for rulelex.

Invoked as::

    rulelex [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m rulelex.cli.main

Commands
--------
tokenize    Tokenize a source file with a rule set
check       Load and compile a rule file
rulesets    List the bundled rule sets
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from rulelex.grammar.rules import RuleSet

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> bytes:
    """Read a source file as bytes, exiting on error."""
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _load_or_exit(rules_path: str | None, builtin_name: str | None) -> "RuleSet":
    """Load a rule set from a file or the bundled sets, exiting on failure."""
    from rulelex.grammar.errors import RuleError
    from rulelex.loader import load_builtin, load_rules

    if (rules_path is None) == (builtin_name is None):
        err_console.print("[red]Error:[/red] Specify exactly one of --rules or --builtin")
        sys.exit(1)
    try:
        if rules_path is not None:
            return load_rules(rules_path)
        else:
            return load_builtin(builtin_name)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] Rule file not found: {rules_path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {rules_path}: {exc}")
        sys.exit(1)
    except RuleError as exc:
        err_console.print(f"[red]Rule error:[/red] {exc}")
        sys.exit(1)


def _emit(text: str, lang: str, output: str | None, what: str) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]{what} written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="rulelex")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Rule-driven lexical scanner: tokenize any language from a rule file."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from rulelex import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]rulelex[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# rulesets command
# ---------------------------------------------------------------------------


@cli.command(name="rulesets")
def rulesets_command() -> None:
    """List the rule sets bundled with rulelex."""
    from rulelex.loader import builtin_names, load_builtin

    console.print("[bold]Bundled rule sets:[/bold]")
    for name in builtin_names():
        console.print(f"  {name} [dim]({len(load_builtin(name))} rules)[/dim]")


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("rules", type=click.Path(exists=False))
def check_command(rules: str) -> None:
    """Load and compile a rule file, then list its rules in priority order.

    RULES is the path to a .json, .yaml or .yml rule file.
    """
    ruleset = _load_or_exit(rules, None)

    table = Table(title=f"Rules: {rules}", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Pattern")
    table.add_column("Delete")
    table.add_column("Normalizers", justify="right")

    for index, rule in enumerate(ruleset):
        table.add_row(
            str(index),
            rule.name,
            Text(rule.pattern.pattern),
            "yes" if rule.suppress else "",
            str(len(rule.normalizers)),
        )

    console.print(table)
    console.print(f"\n[green]OK[/green] {rules}: {len(ruleset)} rule(s) compiled")


# ---------------------------------------------------------------------------
# tokenize command
# ---------------------------------------------------------------------------


@cli.command(name="tokenize")
@click.argument("file", type=click.Path(exists=False))
@click.option("--rules", "rules_path", default=None, help="Rule file (.json, .yaml or .yml)")
@click.option("--builtin", "builtin_name", default=None, help="Name of a bundled rule set, e.g. 1c")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Token stream output format",
)
@click.option("--encoding", default="utf-8", show_default=True, help="Source file encoding")
@click.option(
    "--legacy-positions",
    is_flag=True,
    default=False,
    help="Use LEGACY position accounting while skipping unmatched input",
)
@click.option("--no-eof", is_flag=True, default=False, help="Omit the EOF token from the output")
@click.option("--strict", is_flag=True, default=False, help="Exit with status 1 on Unknown tokens")
@click.option("--output", "-o", default=None, help="Output file (defaults to stdout)")
def tokenize_command(
    file: str,
    rules_path: str | None,
    builtin_name: str | None,
    output_format: str,
    encoding: str,
    legacy_positions: bool,
    no_eof: bool,
    strict: bool,
    output: str | None,
) -> None:
    """Tokenize a source file and print the token stream.

    FILE is the path to the source file to tokenize.
    """
    from rulelex.lexer import RecoveryPolicy, Scanner
    from rulelex.serializer import TokenSerializer

    ruleset = _load_or_exit(rules_path, builtin_name)
    source = _read_source(file)

    recovery = RecoveryPolicy.LEGACY if legacy_positions else RecoveryPolicy.NEWLINE_ONLY
    scanner = Scanner(ruleset, recovery=recovery)
    try:
        tokens = scanner.parse(source, encoding=encoding)
    except LookupError:
        err_console.print(f"[red]Error:[/red] Unknown encoding: {encoding}")
        sys.exit(1)

    shown = [t for t in tokens if not (no_eof and t.is_eof)]
    unknown = [t for t in tokens if t.is_unknown]

    output_format = output_format.lower()
    if output_format == "table":
        table = Table(title=f"Tokens: {file}")
        table.add_column("#", justify="right")
        table.add_column("Tag", style="bold")
        table.add_column("Value")
        table.add_column("Position")
        for index, token in enumerate(shown):
            tag = Text(token.tag, style="red" if token.is_unknown else "")
            table.add_row(str(index), tag, Text(repr(token.value)), f"{token.line}:{token.column}")
        if output:
            with open(output, "w", encoding="utf-8") as fh:
                Console(file=fh, width=120).print(table)
            console.print(f"[green]Tokens written to[/green] {output}")
        else:
            console.print(table)
    else:
        serializer = TokenSerializer()
        if output_format == "json":
            _emit(serializer.to_json(shown, indent=2), "json", output, "Tokens")
        else:
            _emit(serializer.to_yaml(shown), "yaml", output, "Tokens")

    if unknown:
        first = unknown[0]
        err_console.print(
            f"[yellow]Warning:[/yellow] {len(unknown)} unknown token(s), "
            f"first {first.value!r} at {first.line}:{first.column}"
        )
        if strict:
            sys.exit(1)


if __name__ == "__main__":
    cli()
