"""
Vaultkeeper authorization engine.
"""

from .engine import decide, vault_list_scope
from .models import DenyReason, ListScope, Operation, Verdict

__all__ = [
    "decide",
    "vault_list_scope",
    "Operation",
    "DenyReason",
    "ListScope",
    "Verdict",
]
