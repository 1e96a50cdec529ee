"""User-profile REST service: signup, feed, lookup, delete and update."""

__version__ = "1.0.0"
