"""setup-gcloud CLI entry point."""

import click

from setup_gcloud import __version__
from setup_gcloud import main as setup_main


@click.command()
@click.version_option(version=__version__, prog_name="setup-gcloud")
@click.pass_context
def main(ctx):
  """Install and configure gcloud for a GitHub Actions job.

  Inputs are read from the INPUT_* environment variables set by the runner.
  """
  ctx.exit(setup_main.run())


if __name__ == "__main__":
  main()
