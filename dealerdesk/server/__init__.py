"""HTTP surface for search and PDF export."""

from dealerdesk.server.app import create_app

__all__ = ["create_app"]
