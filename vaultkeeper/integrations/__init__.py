"""
Vaultkeeper framework integrations.

Provides adapters for web frameworks.
"""

# FastAPI adapter is imported conditionally to avoid requiring fastapi
# as a hard dependency

__all__ = []

try:
    from .fastapi import VaultkeeperFastAPI, to_http_exception

    __all__.extend(["VaultkeeperFastAPI", "to_http_exception"])
except ImportError:
    pass
