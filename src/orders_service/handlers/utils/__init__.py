"""Shared handler utilities: observability, errors, dependencies and the REST resolver."""
