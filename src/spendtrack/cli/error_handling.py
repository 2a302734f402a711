"""CLI error handling and log output helpers."""

import logging

import click

from spendtrack.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


class ClickEchoHandler(logging.Handler):
    """Send log records to stderr through click, prefixed with the level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        click.echo(f"{record.levelname.capitalize()}: {message}", err=True)


def configure_logging(verbosity: int) -> None:
    """Attach the click handler to the package logger.

    Only errors are shown by default; -v adds info and -vv adds debug.
    """
    level = {0: logging.ERROR, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logger = logging.getLogger("spendtrack")
    logger.setLevel(level)
    if not any(isinstance(handler, ClickEchoHandler) for handler in logger.handlers):
        logger.addHandler(ClickEchoHandler())
