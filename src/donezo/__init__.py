"""Donezo: a single-user task list behind a shared-secret login."""

__version__ = "0.1.0"
