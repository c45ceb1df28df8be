"""Fixit: natural-language maintenance actions for WordPress and Shopify stores."""

__version__ = "0.1.0"
