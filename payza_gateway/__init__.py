"""Payza hosted checkout and IPN reconciliation for Django."""

__version__ = "0.1.0"
