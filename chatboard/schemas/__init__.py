"""Pydantic schemas for HTTP bodies and WebSocket events."""
