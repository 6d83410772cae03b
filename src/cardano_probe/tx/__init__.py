"""
Transaction selection, assembly and signing.
"""

from .builder import TransactionBuilder, KeyInput
from .fees import FeePolicy
from .selection import ADA_TO_LOVELACE, is_usable, select_utxo
from .signing import make_vkey_witness, sign_transaction, verify_witness

__all__ = [
    "TransactionBuilder",
    "KeyInput",
    "FeePolicy",
    "ADA_TO_LOVELACE",
    "is_usable",
    "select_utxo",
    "make_vkey_witness",
    "sign_transaction",
    "verify_witness"
]
