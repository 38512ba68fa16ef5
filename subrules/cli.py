#!/usr/bin/env python3
"""
subrules CLI - compile and apply subsystem variant rules.

Commands:
- tokenize: Show the tokens of a rule
- compile: Compile a rule and print its normalized text
- resolve: Compute the variant code of a role set
- analyze: Show which roles a variant rule found and missed

Example usage:
    subrules tokenize "hisG and (hisA or hisF)"
    subrules compile "hisG and 2 of {hisA, hisF, hisH}" --roles roles.tbl
    subrules resolve --roles roles.tbl --variants checkvariant_rules HisG HisA
    subrules analyze active.1.0 --roles roles.tbl --variants checkvariant_rules HisG

The roles file has one role per line: abbreviation, a tab, and the role ID.
"""

from pathlib import Path
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from subrules.core.exceptions import SubrulesError
from subrules.rules.definitions import load_definitions
from subrules.rules.registry import RuleNamespace
from subrules.rules.resolver import VariantResolver
from subrules.rules.tokenizer import tokenize as tokenize_rule

logger = logging.getLogger(__name__)

# Main app with subcommands
app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="subrules - Subsystem variant rule CLI",
    rich_markup_mode=None,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Compile and apply subsystem variant rules."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def _load_namespace(roles: Path) -> RuleNamespace:
    if not roles.exists():
        typer.echo(f"Roles file not found: {roles}", err=True)
        raise typer.Exit(1)
    namespace = RuleNamespace()
    with roles.open() as f:
        for line in f:
            if not line.strip() or line.startswith("#"):
                continue
            cols = line.rstrip("\r\n").split("\t")
            if len(cols) < 2:
                typer.echo(f"Invalid roles line: {line.strip()}", err=True)
                raise typer.Exit(1)
            namespace.add_role(cols[0].strip(), cols[1].strip())
    logger.debug("Loaded %d roles from %s", len(namespace), roles)
    return namespace


def _load_resolver(
    name: str,
    roles: Path,
    definitions: Optional[Path],
    variants: Optional[Path],
    skip_bad: bool,
) -> VariantResolver:
    for label, path in (("Definitions", definitions), ("Variants", variants)):
        if path is not None and not path.exists():
            typer.echo(f"{label} file not found: {path}", err=True)
            raise typer.Exit(1)
    resolver = VariantResolver(name, _load_namespace(roles))
    resolver.load(
        definitions=load_definitions(definitions) if definitions else (),
        variants=load_definitions(variants) if variants else (),
        skip_bad=skip_bad,
    )
    for bad in resolver.bad_rules:
        typer.echo(f"Skipped rule {bad.name}: {bad.error}", err=True)
    return resolver


# ------------------------------------------------------------------ #
# Tokenize command
# ------------------------------------------------------------------ #


@app.command()
def tokenize(
    rule: str = typer.Argument(..., help="Rule text"),
):
    """Print the tokens of a rule, one per line."""
    for token in tokenize_rule(rule):
        typer.echo(token)


# ------------------------------------------------------------------ #
# Compile command
# ------------------------------------------------------------------ #


@app.command("compile")
def compile_cmd(
    rule: str = typer.Argument(..., help="Rule text"),
    roles: Path = typer.Option(..., "--roles", "-r", help="Role abbreviation file"),
    definitions: Optional[Path] = typer.Option(None, "--definitions", "-d", help="Auxiliary rule definitions"),
):
    """
    Compile a rule and print it in normalized form.

    Example:
        subrules compile "hisG and (hisA or hisF)" --roles roles.tbl
    """
    try:
        resolver = _load_resolver("(none)", roles, definitions, None, skip_bad=False)
        compiled = resolver.namespace.compile(rule)
    except SubrulesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(str(compiled))


# ------------------------------------------------------------------ #
# Resolve command
# ------------------------------------------------------------------ #


@app.command()
def resolve(
    role_ids: List[str] = typer.Argument(None, help="Role IDs present in the genome"),
    roles: Path = typer.Option(..., "--roles", "-r", help="Role abbreviation file"),
    variants: Path = typer.Option(..., "--variants", help="Variant rules file"),
    definitions: Optional[Path] = typer.Option(None, "--definitions", "-d", help="Auxiliary rule definitions"),
    name: str = typer.Option("subsystem", "--name", "-n", help="Subsystem name"),
    skip_bad: bool = typer.Option(False, "--skip-bad", help="Skip rules that fail to compile"),
):
    """
    Print the variant code for a set of role IDs.

    The first variant rule satisfied by the roles wins.
    """
    try:
        resolver = _load_resolver(name, roles, definitions, variants, skip_bad)
    except SubrulesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(resolver.resolve(set(role_ids or [])))


# ------------------------------------------------------------------ #
# Analyze command
# ------------------------------------------------------------------ #


@app.command()
def analyze(
    rule_name: str = typer.Argument(..., help="Variant rule to analyze"),
    role_ids: List[str] = typer.Argument(None, help="Role IDs present in the genome"),
    roles: Path = typer.Option(..., "--roles", "-r", help="Role abbreviation file"),
    variants: Path = typer.Option(..., "--variants", help="Variant rules file"),
    definitions: Optional[Path] = typer.Option(None, "--definitions", "-d", help="Auxiliary rule definitions"),
    skip_bad: bool = typer.Option(False, "--skip-bad", help="Skip rules that fail to compile"),
):
    """Show the role abbreviations a variant rule found and missed."""
    try:
        resolver = _load_resolver("subsystem", roles, definitions, variants, skip_bad)
    except SubrulesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    analysis = resolver.analyze(rule_name, set(role_ids or []))
    if analysis.matched is None:
        typer.echo(f"No variant rule named {rule_name}", err=True)
        raise typer.Exit(1)

    table = Table(title=f"{rule_name}: {'match' if analysis.matched else 'no match'}")
    table.add_column("Found")
    table.add_column("Missing")
    rows = max(len(analysis.found), len(analysis.not_found))
    for i in range(rows):
        found = analysis.found[i] if i < len(analysis.found) else ""
        missing = analysis.not_found[i] if i < len(analysis.not_found) else ""
        table.add_row(found, missing)
    Console().print(table)


if __name__ == "__main__":
    app()
