"""
Ogmios clients built on a node session.
"""

from .ledger import LedgerStateQueryClient
from .submission import TransactionSubmissionClient

__all__ = [
    "LedgerStateQueryClient",
    "TransactionSubmissionClient"
]
