"""Core resolution engine: versioning, identities, solver and resolver."""
