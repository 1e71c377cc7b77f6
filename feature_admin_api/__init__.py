"""
Top‑level package for the Feature Admin API.

All functionality lives in submodules under ``app``; run the service
with ``uvicorn feature_admin_api.app.main:app``.
"""

__all__ = []
