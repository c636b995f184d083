"""Observability — structured logging."""
