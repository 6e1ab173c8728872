"""
Web application front-end for imperial-calc.

Provides a JSON API over a single calculator session.
"""

from .server import app

__all__ = ["app"]
