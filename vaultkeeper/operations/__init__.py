"""
Vaultkeeper operations facade.
"""

from .facade import VaultOperations

__all__ = [
    "VaultOperations",
]
