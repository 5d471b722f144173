"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  The code is split by layer: ``core`` (settings, logging,
database, cache, errors), ``repositories`` (SQL per table),
``services`` (business rules and transactions), ``schemas`` (Pydantic
models) and ``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
