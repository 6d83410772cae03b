"""
Fee and size policy for transaction assembly.

Built from one protocol parameter snapshot and used for exactly one build;
the snapshot is never cached across transactions.
"""

from __future__ import annotations
from dataclasses import dataclass

from pycardano import TransactionOutput

from ..models import DEFAULT_MAX_TRANSACTION_SIZE, DEFAULT_MAX_VALUE_SIZE, ProtocolParameters

# Bytes of ledger bookkeeping charged per UTxO entry on top of the output itself
UTXO_ENTRY_OVERHEAD = 160


@dataclass(frozen=True)
class FeePolicy:
    """Linear fee, per-byte UTxO cost and size ceilings."""

    min_fee_coefficient: int
    min_fee_constant: int
    coins_per_utxo_byte: int
    max_value_size: int = DEFAULT_MAX_VALUE_SIZE
    max_transaction_size: int = DEFAULT_MAX_TRANSACTION_SIZE

    @classmethod
    def from_protocol_parameters(cls, params: ProtocolParameters) -> FeePolicy:
        return cls(
            min_fee_coefficient=params.min_fee_coefficient,
            min_fee_constant=params.min_fee_constant.lovelace,
            coins_per_utxo_byte=params.min_utxo_deposit_coefficient,
            max_value_size=params.value_size_limit(),
            max_transaction_size=params.transaction_size_limit(),
        )

    def min_fee(self, size: int) -> int:
        """Minimum fee in lovelace for a serialized transaction of ``size`` bytes."""
        return self.min_fee_coefficient * size + self.min_fee_constant

    def min_lovelace(self, output: TransactionOutput) -> int:
        """Minimum ada an output must carry to be accepted by the ledger."""
        return self.coins_per_utxo_byte * (UTXO_ENTRY_OVERHEAD + len(output.to_cbor()))

    @staticmethod
    def value_size(output: TransactionOutput) -> int:
        return len(output.amount.to_cbor())
