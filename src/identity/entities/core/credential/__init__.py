"""Credential entity package."""

from .entity import Credential, CredentialsType

__all__ = ["Credential", "CredentialsType"]
