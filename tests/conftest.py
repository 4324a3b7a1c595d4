"""Test configuration and fixtures for federated-identity."""

from tests.fixtures import *  # noqa: F401,F403
