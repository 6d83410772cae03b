"""
Ledger state types as returned by Ogmios.

Field names follow the Ogmios v6 JSON schema through aliases. All lovelace
quantities are Python ints.
"""

from __future__ import annotations
import re
from typing import Any, Dict, Optional

from pycardano import TransactionId, TransactionInput
from pydantic import BaseModel, Field, field_validator

ADA = "ada"
LOVELACE = "lovelace"

DEFAULT_MAX_VALUE_SIZE = 5000
DEFAULT_MAX_TRANSACTION_SIZE = 16384

_TX_ID_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class Lovelace(BaseModel):
    lovelace: int = Field(..., ge=0)


class AdaAmount(BaseModel):
    """``{"ada": {"lovelace": n}}``"""
    ada: Lovelace

    @property
    def lovelace(self) -> int:
        return self.ada.lovelace


class ByteSize(BaseModel):
    bytes: int = Field(..., gt=0)


class ProtocolParameters(BaseModel):
    """
    Snapshot of node-wide fee and size constants.

    Only the fields the probe's fee policy reads are declared; everything
    else Ogmios returns is kept as extra data.
    """

    min_fee_coefficient: int = Field(..., ge=0, alias="minFeeCoefficient")
    min_fee_constant: AdaAmount = Field(..., alias="minFeeConstant")
    stake_pool_deposit: AdaAmount = Field(..., alias="stakePoolDeposit")
    stake_credential_deposit: AdaAmount = Field(..., alias="stakeCredentialDeposit")
    min_utxo_deposit_coefficient: int = Field(..., ge=0, alias="minUtxoDepositCoefficient")
    max_value_size: Optional[ByteSize] = Field(default=None, alias="maxValueSize")
    max_transaction_size: Optional[ByteSize] = Field(default=None, alias="maxTransactionSize")

    model_config = {"populate_by_name": True, "extra": "allow", "frozen": True}

    def value_size_limit(self) -> int:
        """Maximum serialized output value size, 5000 bytes when unset."""
        if self.max_value_size is None:
            return DEFAULT_MAX_VALUE_SIZE
        return self.max_value_size.bytes

    def transaction_size_limit(self) -> int:
        """Maximum serialized transaction size, 16384 bytes when unset."""
        if self.max_transaction_size is None:
            return DEFAULT_MAX_TRANSACTION_SIZE
        return self.max_transaction_size.bytes


class TransactionReference(BaseModel):
    id: str

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not _TX_ID_RE.match(v):
            raise ValueError(f"transaction id must be 32 bytes of hex, got {v!r}")
        return v.lower()


class UnspentOutput(BaseModel):
    """An unspent output, identified by (transaction id, output index)."""

    transaction: TransactionReference
    index: int = Field(..., ge=0)
    address: str
    value: Dict[str, Dict[str, int]]

    model_config = {"extra": "allow", "frozen": True}

    @property
    def transaction_id(self) -> str:
        return self.transaction.id

    @property
    def lovelace(self) -> int:
        """Ada quantity in lovelace, 0 if the output carries no ada."""
        return self.value.get(ADA, {}).get(LOVELACE, 0)

    def is_pure_ada(self) -> bool:
        """True when ada is the only asset in the value map."""
        return list(self.value) == [ADA] and list(self.value[ADA]) == [LOVELACE]

    def to_transaction_input(self) -> TransactionInput:
        return TransactionInput(TransactionId(bytes.fromhex(self.transaction_id)), self.index)

    def to_log_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return f"{self.transaction_id}#{self.index}"
