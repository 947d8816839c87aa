"""
Vaultkeeper secrets module.
"""

from .models import CreateSecretRequest, SecretType, VaultSecret, VaultSecrets
from .store import SecretStore

__all__ = [
    "SecretStore",
    "VaultSecret",
    "VaultSecrets",
    "SecretType",
    "CreateSecretRequest",
]
