"""Formatters for PR tables and port results.

Text output is a borderless rich table, markdown goes through the Jinja2
templates, JSON is a list of ``to_dict()`` records.
"""

import io
import json
import shutil
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table, box

from ..models import PortBatch, PullRequestInfo, ReleaseRow
from .output import OutputFormat
from .templates import render_template


def _table(headers: Sequence[str], max_width: Optional[int] = None) -> Table:
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    for header in headers:
        table.add_column(header, max_width=max_width if header == "Title" else None)
    return table


def table_to_text(table: Table) -> str:
    buf = io.StringIO()
    console = Console(
        file=buf,
        width=shutil.get_terminal_size((120, 20)).columns,
        no_color=True,
        highlight=False,
    )
    console.print(table)
    return buf.getvalue()


def _to_json(records: Iterable[dict]) -> str:
    return json.dumps(list(records), default=str, indent=2) + "\n"


def release_rows_to_str(
    rows: List[ReleaseRow], format: str, title: Optional[str] = None
) -> str:
    if format == OutputFormat.JSON.value:
        return _to_json(row.to_dict() for row in rows)
    if format == OutputFormat.MARKDOWN.value:
        return render_template("markdown", "release_rows", rows=rows, title=title)

    table = _table(["PR", "Title", "Days after commit", "Status"], max_width=60)
    for row in rows:
        table.add_row(row.reference, row.title, str(row.age_days), row.status)
    return table_to_text(table)


def pull_requests_to_str(prs: List[PullRequestInfo], reference_of) -> str:
    """Table of the PRs about to be cherry-picked.

    Args:
        prs: Pull requests in processing order.
        reference_of: Callable turning a PR number into ``owner/repo#N``.
    """
    table = _table(["PR", "Commit SHA", "Title"], max_width=60)
    for pr in prs:
        sha = (pr.merge_commit_hash or "")[:10]
        table.add_row(reference_of(pr.number), sha, pr.title)
    return table_to_text(table)


def port_batch_to_str(batch: PortBatch, branch: str, format: str) -> str:
    if format == OutputFormat.JSON.value:
        return json.dumps(
            {
                "branch": branch,
                "aborted": batch.aborted,
                "results": [r.to_dict() for r in batch.results],
            },
            indent=2,
        ) + "\n"
    if format == OutputFormat.MARKDOWN.value:
        return render_template("markdown", "port_batch", batch=batch, branch=branch)

    table = _table(["PR", "Commit SHA", "Title", "Outcome"], max_width=60)
    for result in batch.results:
        outcome = result.outcome.value
        if result.reason:
            outcome += f" ({result.reason})"
        number = result.commit.reference_number
        table.add_row(
            f"#{number}" if number is not None else "",
            result.commit.short_hash,
            result.commit.title,
            outcome,
        )
    return table_to_text(table)
