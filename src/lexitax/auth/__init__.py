"""Credential storage, session management and the auth gateway."""
