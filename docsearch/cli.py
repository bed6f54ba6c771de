#!/usr/bin/env python3
"""Command-line interface for docsearch."""
import json
import sys

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .data_loader import FixtureError, load_entries, load_fixture
from .engine import search as run_search
from .harness import run_fixtures
from .index import Index, InvalidEntry
from .search_config import MAX_RESULTS

console = Console()


def _load_index(corpus: str) -> Index:
    """Load and index a corpus, exiting with status 1 on bad input."""
    try:
        index = Index.build(load_entries(corpus))
    except (OSError, ValueError) as e:
        # InvalidEntry and JSONDecodeError are both ValueErrors
        label = 'Invalid corpus entry' if isinstance(e, InvalidEntry) else 'Error loading corpus'
        console.print(f"[bold red]{label}: {escape(str(e))}[/bold red]")
        sys.exit(1)
    return index


@click.group()
def cli():
    """docsearch - ranked path/name search over documentation indices."""
    pass


@cli.command(name='search')
@click.argument('query')
@click.option('--corpus', '-c', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Path to corpus JSONL file (one entry per line: path, name, kind, ...).')
@click.option('--path-aware', '-p', is_flag=True, default=False,
              help='Treat "::" and "." in the query as path separators (e.g. "string::from_utf8").')
@click.option('--limit', '-k', default=MAX_RESULTS, type=click.IntRange(min=1), show_default=True,
              help='Maximum number of results per category.')
@click.option('--jobs', '-j', default=1, type=int, show_default=True,
              help='Worker processes for scanning large corpora (-1 for all cores - 1).')
@click.option('--json', 'as_json', is_flag=True, default=False,
              help='Print results as JSON in the fixture format.')
def search(query, corpus, path_aware, limit, jobs, as_json):
    """Search the corpus for QUERY (prefix with "fn:", "struct:", ... to filter by kind)."""
    index = _load_index(corpus)
    results = run_search(index, query, path_aware=path_aware, limit=limit, n_jobs=jobs)

    if as_json:
        click.echo(json.dumps(results.to_dict(include_empty=True), indent=2))
        return

    display_results(results)


def display_results(results):
    """Display a ResultSet as one table per non-empty category."""
    if results.is_empty:
        console.print(f"[bold yellow]No results found for: {escape(results.query)}[/bold yellow]")
        return

    console.print(f"\n[bold cyan]Search Results for:[/bold cyan] \"{escape(results.query)}\"")
    for category, matches in results.groups.items():
        if not matches:
            continue

        table = Table(box=box.ROUNDED, title=f"{category.value} ({len(matches)})")
        table.add_column("#", style="dim", width=4)
        table.add_column("Path", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Kind", style="blue", width=10)
        table.add_column("Score", style="green", justify="right")
        for idx, m in enumerate(matches, 1):
            table.add_row(str(idx), m.entry.path_str, m.entry.name,
                          m.entry.kind.value, f"{m.score:.4f}")
        console.print(table)

    console.print()


@cli.command(name='check')
@click.argument('fixtures', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--corpus', '-c', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Path to corpus JSONL file the fixtures were written against.')
@click.option('--exact', is_flag=True, default=False,
              help='Require each category to equal the expected list, not just contain it in order.')
@click.option('--path-aware', '-p', is_flag=True, default=False,
              help='Run fixture queries with path-aware tokenization.')
def check(fixtures, corpus, exact, path_aware):
    """Run FIXTURES (.js or .json) against the corpus."""
    index = _load_index(corpus)

    try:
        loaded = [load_fixture(path) for path in fixtures]
    except FixtureError as e:
        console.print(f"[bold red]Invalid fixture: {escape(str(e))}[/bold red]")
        sys.exit(1)

    report = run_fixtures(index, loaded, exact=exact, path_aware=path_aware)

    failed = 0
    for name, errors in report.items():
        if not errors:
            console.print(f"[green]✓ PASS[/green] {name}")
            continue
        failed += 1
        console.print(f"[bold red]✗ FAIL[/bold red] {name}")
        for error in errors:
            console.print(f"     [dim]→ {escape(error)}[/dim]")

    console.print(f"\n[bold]{len(report) - failed} passed, {failed} failed[/bold]")
    if failed:
        sys.exit(1)


if __name__ == '__main__':
    cli()
