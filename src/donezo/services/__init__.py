"""Store-backed services for sessions, API tokens and tasks."""
