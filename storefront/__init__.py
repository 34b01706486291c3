"""Storefront API: user accounts, product catalog and image uploads."""

__version__ = "0.1.0"
