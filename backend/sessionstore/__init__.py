"""Authenticated session and user record service."""
