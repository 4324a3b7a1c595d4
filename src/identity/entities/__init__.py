"""Entities module.

Entities are organized by business concept. Each entity has its own package
under ``core`` containing its domain model.
"""

from .core.credential import Credential, CredentialsType

__all__ = ["Credential", "CredentialsType"]
