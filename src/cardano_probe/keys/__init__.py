"""
Key derivation for the probe wallet.
"""

from .derivation import (
    DerivationPath, KeyChain, PaymentKeyPair, derive_address, derive_key_chain,
    harden, mnemonic_to_entropy, ACCOUNT_PATH, PAYMENT_PATH, STAKING_PATH
)

__all__ = [
    "DerivationPath",
    "KeyChain",
    "PaymentKeyPair",
    "derive_address",
    "derive_key_chain",
    "harden",
    "mnemonic_to_entropy",
    "ACCOUNT_PATH",
    "PAYMENT_PATH",
    "STAKING_PATH"
]
