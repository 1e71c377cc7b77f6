"""
Application package initializer.

Contains the main entrypoint for the API and its submodules: ``core``
(configuration, database, logging, errors), ``schemas``,
``repositories``, ``services`` and versioned routers under ``api``.
"""

from .main import app  # noqa: F401
