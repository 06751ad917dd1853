"""Restaurant Guide: cities, restaurants, and the data context that stores them."""

__version__ = "0.1.0"
