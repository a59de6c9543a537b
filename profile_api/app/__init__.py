"""
Application package initializer.

The project is organised by layer: ``core`` (configuration, logging,
store connection, errors, auth), ``repositories`` (MongoDB access),
``services`` (validation and business rules), ``schemas`` (pydantic
models) and ``api`` (versioned HTTP routes).
"""

from .main import app  # noqa: F401
