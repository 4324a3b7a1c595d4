"""Federated identity core.

This package links local identity accounts to external OpenID Connect
provider accounts and produces the credential records an identity store
persists.
"""

__version__ = "0.1.0"
