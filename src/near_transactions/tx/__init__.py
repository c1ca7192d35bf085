"""
Transaction construction for NEAR.
"""

from .builder import TransactionBuilder

__all__ = ["TransactionBuilder"]
