"""
Signing infrastructure for NEAR transactions.
"""

from .signer import Signer
from .in_memory import InMemorySigner, KeyFile, credentials_path

__all__ = [
    "Signer",
    "InMemorySigner",
    "KeyFile",
    "credentials_path",
]
