"""ADMIN module — accounts and contracts."""
