"""Action definition resolution and plugin framework."""

from .app import App, ServiceNotFoundError, create_app

__version__ = "0.1.0"

__all__ = ["App", "ServiceNotFoundError", "create_app", "__version__"]
