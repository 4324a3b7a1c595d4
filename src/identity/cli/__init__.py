"""Developer CLI for inspecting OIDC credentials."""
