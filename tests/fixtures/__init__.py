"""Shared pytest fixtures."""

from .oidc import *  # noqa: F401,F403
