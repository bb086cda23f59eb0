"""Cherry-pick merged pull requests onto a stabilization branch."""

import logging
from typing import List, Optional, Tuple

import click

from ..app import AppContext
from ..descriptor import format_pr_name
from ..engine import port
from ..errors import ResolutionError
from ..models import CommitRef, PullRequestInfo
from ..utils.formatters import port_batch_to_str, pull_requests_to_str
from ..utils.output import OutputFormat, format_option
from .util import collect_pr_numbers, release_errors

log = logging.getLogger(__name__)


def resolve_merge_commits(
    app: AppContext, numbers: List[int]
) -> Tuple[List[PullRequestInfo], List[CommitRef]]:
    """Look up each PR on the forge and the commit it was merged as.

    Raises:
        ResolutionError: If a PR has no merge commit (not merged yet).
    """
    forge = app.get_forge()
    history = app.get_history()

    prs = []
    commits = []
    for number in numbers:
        pr = forge.get_pull_request(number)
        if not pr.merge_commit_hash:
            raise ResolutionError(f"pull request #{number} has no merge commit")
        prs.append(pr)
        commits.append(history.commit(pr.merge_commit_hash))
    return prs, commits


@click.command()
@click.pass_obj
@click.option(
    "--branch",
    "branch",
    type=str,
    required=True,
    help="The release branch for cherry-picks, e.g. v1.12.",
)
@click.option(
    "--pr",
    "pr",
    type=int,
    multiple=True,
    help="The pull request number to cherry-pick. Can be repeated.",
)
@click.option(
    "--pr-list",
    "pr_list",
    type=str,
    default=None,
    help="Comma-separated pull request numbers, e.g. 41,42,57.",
)
@format_option()
def add(app: AppContext, branch: str, pr: Tuple[int, ...], pr_list: Optional[str], format: str):
    """Cherry-pick the merge commits of pull requests onto BRANCH.

    Pull requests already present on the branch (matched by commit title)
    are skipped. The first conflict stops the run.
    """
    numbers = collect_pr_numbers(pr, pr_list)
    if not numbers:
        raise click.UsageError("no pull request is specified, use --pr or --pr-list")

    with release_errors():
        history = app.get_history()
        if not history.branch_exists(branch):
            raise click.ClickException(f"invalid branch '{branch}'")

        owner, repo = app.get_owner_repo()
        log.info(f"making release on {owner}/{repo}")

        prs, commits = resolve_merge_commits(app, numbers)
        if format == OutputFormat.TEXT.value:
            click.echo(pull_requests_to_str(prs, lambda n: format_pr_name(owner, repo, n)))

        view = app.get_workspace().checkout(branch)
        batch = port(view, commits)

    click.echo(port_batch_to_str(batch, branch, format), nl=False)

    if batch.aborted:
        failed = batch.failed[0]
        raise click.ClickException(
            f"cherry-pick of {failed.commit.short_hash} onto {branch} failed, "
            f"{len(batch.pending)} pull request(s) not attempted: {failed.reason}"
        )
