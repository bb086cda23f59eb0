import click

from ..app import AppContext
from ..engine import parse_version
from ..utils.formatters import release_rows_to_str
from ..utils.output import format_option
from .util import release_errors


@click.command()
@click.pass_obj
@click.option(
    "--version",
    "version_text",
    type=str,
    required=True,
    help="The released version to compare trunk against, e.g. 1.12.1.",
)
@format_option()
def show(app: AppContext, version_text: str, format: str):
    """List trunk pull requests not yet released at a version."""
    with release_errors():
        baseline = parse_version(version_text, tag_prefix=app.config.repository.tag_prefix)
        driver = app.get_driver()
        entries = driver.unreleased_in_branch(baseline)
        rows = driver.to_rows(entries)

    title = f"Pull requests not released in {baseline}"
    click.echo(release_rows_to_str(rows, format, title=title), nl=False)
