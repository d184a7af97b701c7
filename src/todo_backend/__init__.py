"""
Tagged Todo Backend package.

A FastAPI service for todos with many-to-many tags. The ASGI application
lives in :mod:`todo_backend.main` (``todo_backend.main:app``).
"""

__version__ = "0.2.0"
