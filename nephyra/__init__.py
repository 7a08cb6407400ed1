"""Nephyra — smart system assistant for Linux kernels."""

__version__ = "0.1.0"
