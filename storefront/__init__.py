"""Storefront: users, product catalog and per-user shopping carts over FastAPI."""

__version__ = "1.0.0"
