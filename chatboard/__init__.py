"""
ChatBoard server package.

A real-time chat and kanban board served over FastAPI and WebSockets.
"""

__version__ = "0.1.0"
