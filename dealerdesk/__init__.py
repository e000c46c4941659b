"""dealerdesk - back-office search and PDF export service."""

__version__ = "0.1.0"
