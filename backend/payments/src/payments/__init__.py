"""Payments service: Stripe checkout sessions and webhook republishing."""

__version__ = "0.1.0"
