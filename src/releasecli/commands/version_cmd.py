import click

from ..version import get_version


@click.command("version")
def version():
    """Print the release-cli version."""
    click.echo(get_version())
