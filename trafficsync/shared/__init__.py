"""Shared persistence, schemas and messaging used by the web service."""
