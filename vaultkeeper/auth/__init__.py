"""
Vaultkeeper authentication module.

Verifies bearer tokens and yields user ids.
"""

from .sessions import SessionManager

__all__ = [
    "SessionManager",
]
