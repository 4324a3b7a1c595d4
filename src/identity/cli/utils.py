"""Shared utilities for CLI commands."""

from rich.console import Console

# Initialize Rich console for colored output
console = Console()


def mask_token(token: str, visible: int = 6) -> str:
    """Mask a token for display, keeping only a short prefix."""
    if not token:
        return ""
    if len(token) <= visible:
        return "*" * len(token)
    return f"{token[:visible]}…"
