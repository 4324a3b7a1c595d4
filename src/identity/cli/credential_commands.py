"""OIDC credential CLI commands."""

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.identity.core.errors import IdentityError
from src.identity.core.models.oidc import OIDCCredentialsConfig, oidc_unique_id
from src.identity.core.services.oidc.credentials import (
    decode_oidc_config,
    new_oidc_credentials,
)
from src.identity.entities.core.credential.entity import Credential

from .utils import console, mask_token

credentials_app = typer.Typer(help="🔑 OIDC credential commands")


def load_oidc_config(path: Path) -> OIDCCredentialsConfig:
    """Load a provider set from a payload file or a full credential JSON file."""
    data = json.loads(path.read_text())
    if isinstance(data, dict) and "config" in data:
        credential = Credential.model_validate(data)
        return decode_oidc_config(credential)
    return OIDCCredentialsConfig.model_validate(data)


@credentials_app.command("canonical-id")
def canonical_id(
    provider: str = typer.Argument(..., help="Provider connection key"),
    subject: str = typer.Argument(..., help="Provider-issued subject"),
) -> None:
    """Print the store-wide identifier of a provider account."""
    console.print(oidc_unique_id(provider, subject), markup=False, highlight=False)


@credentials_app.command("build")
def build(
    provider: str = typer.Option(..., "--provider", "-p", help="Provider connection key"),
    subject: str = typer.Option(..., "--subject", "-s", help="Provider-issued subject"),
    id_token: str = typer.Option("", "--id-token", help="ID token"),
    access_token: str = typer.Option("", "--access-token", help="Access token"),
    refresh_token: str = typer.Option("", "--refresh-token", help="Refresh token"),
    organization: str = typer.Option("", "--organization", "-o", help="SSO organization"),
) -> None:
    """Build a new oidc credential and print it as JSON."""
    try:
        credential = new_oidc_credentials(
            id_token, access_token, refresh_token, provider, subject, organization
        )
    except IdentityError as e:
        console.print(f"[red]❌ {escape(e.message)}[/red]")
        raise typer.Exit(1) from e

    typer.echo(credential.model_dump_json(indent=2))


@credentials_app.command("inspect")
def inspect(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Payload or credential JSON file"
    ),
    show_tokens: bool = typer.Option(
        False, "--show-tokens", help="Print tokens without masking"
    ),
) -> None:
    """Show the provider accounts linked in a stored oidc credential."""
    try:
        config = load_oidc_config(file)
    except (IdentityError, ValueError) as e:
        console.print(
            f"[red]❌ Unable to read oidc credentials from {escape(str(file))}: "
            f"{escape(str(e))}[/red]"
        )
        raise typer.Exit(1) from e

    if not config.providers:
        console.print("[yellow]No linked providers[/yellow]")
        return

    def render(token: str) -> str:
        return token if show_tokens else mask_token(token)

    table = Table(title="Linked providers")
    table.add_column("#", style="dim")
    table.add_column("Provider", style="cyan")
    table.add_column("Subject")
    table.add_column("Organization")
    table.add_column("Access token")

    for index, link in enumerate(config.providers):
        table.add_row(
            str(index),
            link.provider,
            link.subject,
            link.organization or "-",
            render(link.current_access_token),
        )

    console.print(table)
    console.print(
        Panel.fit(
            f"Organization: {config.organization() or '-'}\n"
            f"Identifiers: {', '.join(config.identifiers())}",
            title="Credential",
        )
    )
