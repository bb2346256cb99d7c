"""Shared utilities for the ChatBoard server."""
