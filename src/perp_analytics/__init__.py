"""Perpetual-futures trade analytics: fees, equity curves and portfolio stats."""

__version__ = "0.1.0"
