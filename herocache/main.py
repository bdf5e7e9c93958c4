"""
herocache API - local-first access to the heroes catalog.

This is the main entry point for the FastAPI application.
All application configuration and setup is handled by the app factory.

Run with:
    uvicorn herocache.main:app
"""

# Initialize settings and logging first
from herocache.core import get_settings, setup_logging

settings = get_settings()
setup_logging(debug_mode=settings.debug)

# Create the FastAPI application
from herocache.core.app_factory import create_app  # noqa: E402

app = create_app(settings)
