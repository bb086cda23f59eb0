from contextlib import contextmanager
from typing import Iterable, List, Optional

import click

from ..errors import ReleaseError


@contextmanager
def release_errors():
    """Report a ReleaseError as a click error (stderr, exit code 1)."""
    try:
        yield
    except ReleaseError as e:
        raise click.ClickException(f"{e.kind.value} error: {e.message}")


def parse_pr_list(value: Optional[str]) -> List[int]:
    if not value:
        return []
    numbers = []
    for item in value.split(","):
        item = item.strip().lstrip("#")
        if not item:
            continue
        if not item.isdigit():
            raise click.BadParameter(f"invalid pull request number '{item}'", param_hint="--pr-list")
        numbers.append(int(item))
    return numbers


def collect_pr_numbers(pr: Iterable[int], pr_list: Optional[str]) -> List[int]:
    """Merge --pr and --pr-list into a sorted list without duplicates."""
    numbers = set(pr) | set(parse_pr_list(pr_list))
    return sorted(numbers)
