#!/usr/bin/env python3
"""CLI interface for identity development utilities."""

import typer

from src.identity.runtime.log_config import configure_logging

from .credential_commands import credentials_app

app = typer.Typer(
    name="identity-dev",
    help="Identity Development CLI - Build and inspect OIDC credentials",
    rich_markup_mode="rich",
)

app.add_typer(credentials_app, name="credentials")


@app.callback()
def startup() -> None:
    """Identity Development CLI - Build and inspect OIDC credentials."""
    configure_logging()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
