"""Weir HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives webhook deliveries.

Usage
-----
Create the application::

    from weir.api import create_app

    app = create_app()              # secret from WEIR_BITBUCKET_WEBHOOK_TOKEN
    app = create_app(dependencies)  # explicit config and event sink
"""

from weir.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
