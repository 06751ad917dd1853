"""FastAPI web layer for Restaurant Guide.

Re-exports the application factory so consumers can import directly:
    from Restaurant_Guide.web import create_app
"""

from Restaurant_Guide.web.app import create_app

__all__ = ["create_app"]
