"""Exact EulerSwap curve math, swap quotes and exact-input routing across pools."""

__version__ = "0.1.0"

__all__ = ["codec", "fixed", "curve", "quote", "pricing", "models", "candidates", "router"]