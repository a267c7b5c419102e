from . import stocks, lookup, health

__all__ = [
    "stocks",
    "lookup",
    "health",
]
