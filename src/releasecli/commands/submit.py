"""Label the pull requests that make up a release.

The label is the version itself (``1.12.1``). A pull request that already
carries a label of the same minor version (``1.12*``) was submitted with an
earlier patch release and is left alone.
"""

import logging
from typing import List, Optional

import click

from ..app import AppContext
from ..engine import parse_version, shipped_in
from ..errors import ConfigurationError, ForgeNotFoundError
from ..models import Version
from ..providers import ForgeProvider
from ..utils.formatters import release_rows_to_str
from ..utils.output import OutputFormat, format_option
from .util import release_errors

log = logging.getLogger(__name__)


def ensure_label(forge: ForgeProvider, name: str, color: str, dry_run: bool = False) -> bool:
    """Create the label if it does not exist yet.

    Returns:
        True if the label was (or, with dry_run, would be) created.
    """
    try:
        forge.get_label(name)
        return False
    except ForgeNotFoundError:
        pass

    if dry_run:
        log.info(f"would create github label {name}")
    else:
        log.info(f"create github label {name}")
        forge.create_label(name, color)
    return True


def label_pull_requests(
    forge: ForgeProvider, numbers: List[int], version: Version, dry_run: bool = False
) -> List[int]:
    """Add the version label to every PR not yet labeled for its minor version.

    Returns:
        Numbers of the PRs that were (or would be) labeled.
    """
    label = str(version)
    labeled = []
    for number in numbers:
        pr = forge.get_pull_request(number)
        if pr.has_label_with_prefix(version.minor_prefix):
            log.info(f"#{number} is already labeled to {version.minor_prefix}")
            continue
        if dry_run:
            log.info(f"would add github label {label} to #{number}")
        else:
            forge.add_label(number, label)
            log.info(f"add github label {label} to #{number}")
        labeled.append(number)
    return labeled


def resolve_release_version(app: AppContext, version_text: Optional[str]) -> Version:
    resolver = app.get_resolver()
    if version_text is None:
        version = resolver.latest_version()
    else:
        version = parse_version(version_text, tag_prefix=app.config.repository.tag_prefix)
    if not version.is_released:
        raise ConfigurationError(f"repo is still in pre-released state: {version}")
    return version


@click.command()
@click.pass_obj
@click.option(
    "--version",
    "version_text",
    type=str,
    default=None,
    help="The version to submit (default: the latest version tag).",
)
@click.option(
    "--access",
    "access_token",
    type=str,
    default=None,
    help="GitHub access token (default: ACCESS_TOKEN, GITHUB_TOKEN, GH_TOKEN or `gh auth token`).",
)
@click.option(
    "--dry-run",
    "dry_run",
    is_flag=True,
    default=False,
    help="Show what would be labeled without changing anything on GitHub.",
)
@format_option()
def submit(
    app: AppContext,
    version_text: Optional[str],
    access_token: Optional[str],
    dry_run: bool,
    format: str,
):
    """Label the pull requests picked for a release with its version."""
    with release_errors():
        version = resolve_release_version(app, version_text)
        resolver = app.get_resolver()
        baseline = resolver.previous_released_version(version)
        log.info(f"submitting PRs between {baseline} and {version}")

        # the version must be tagged, its tag bounds what gets labeled
        resolver.commit_for(version)

        driver = app.get_driver()
        entries = shipped_in(driver.picked_for_release(version, baseline), version)
        rows = driver.to_rows(entries)
        numbers = sorted({row.number for row in rows})
        log.info(f"submit {len(numbers)} commits to {version}")

        title = f"Pull requests submitted to {version}"
        click.echo(release_rows_to_str(rows, format, title=title), nl=False)

        if not numbers:
            return

        forge = app.get_forge(token=access_token, require_token=not dry_run)
        ensure_label(forge, str(version), app.config.forge.label_color, dry_run=dry_run)
        labeled = label_pull_requests(forge, numbers, version, dry_run=dry_run)

    if format == OutputFormat.TEXT.value:
        verb = "would label" if dry_run else "labeled"
        click.echo(f"{verb} {len(labeled)} of {len(numbers)} pull request(s) with {version}")
