"""HTTP layer for the menu import service.

Exposes the bulk upload and template endpoints through FastAPI. Route
handlers stay thin: they resolve the tenant, read the upload and hand off
to the service layer.
"""

from .app import create_app

__all__ = ["create_app"]
