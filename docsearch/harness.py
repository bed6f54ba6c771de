"""Run search fixtures against an index and report mismatches."""
from typing import Dict, Iterable, List, Tuple

from .data_loader import Fixture
from .engine import ResultSet, search
from .index import Index


def _format_row(row: Tuple[str, str]) -> str:
    path, name = row
    return f"{path}::{name}" if path else name


def compare_results(results: ResultSet, fixture: Fixture, exact: bool = False) -> List[str]:
    """
    Compare a ResultSet with a fixture's expected table.

    In the default mode every expected entry must be present in its category
    and appear after the previously expected one (other results may sit in
    between). With exact=True the category must equal the expected list.

    Returns:
        List of failure messages, empty when the results satisfy the fixture
    """
    errors = []
    for category, expected_rows in fixture.expected.items():
        actual_rows = [(m.entry.path_str, m.entry.name) for m in results[category]]

        if exact:
            if actual_rows != expected_rows:
                errors.append(
                    f"[{category.value}] expected {[_format_row(r) for r in expected_rows]}, "
                    f"got {[_format_row(r) for r in actual_rows]}"
                )
            continue

        prev_pos = -1
        for row in expected_rows:
            try:
                pos = actual_rows.index(row, prev_pos + 1)
            except ValueError:
                if row in actual_rows:
                    errors.append(f"[{category.value}] {_format_row(row)} is not in the right place")
                else:
                    errors.append(f"[{category.value}] {_format_row(row)} was not found")
                continue
            prev_pos = pos
    return errors


def check_fixture(index: Index, fixture: Fixture, exact: bool = False,
                  path_aware: bool = False) -> List[str]:
    """Search the fixture's query and compare with its expectations."""
    results = search(index, fixture.query, path_aware=path_aware)
    return compare_results(results, fixture, exact=exact)


def run_fixtures(index: Index, fixtures: Iterable[Fixture], exact: bool = False,
                 path_aware: bool = False) -> Dict[str, List[str]]:
    """Check several fixtures; maps fixture name to its failures."""
    return {
        fixture.name: check_fixture(index, fixture, exact=exact, path_aware=path_aware)
        for fixture in fixtures
    }
