"""Allow ``python -m tickwatch_app``."""

from tickwatch_app.main import cli

cli()
