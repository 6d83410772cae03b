"""
Transaction assembly for the probe.

Registers key inputs and explicit outputs, balances the transaction with an
optional change output and returns the finished transaction body. The fee is
computed from the exact serialized size of the signed transaction, using
placeholder witnesses of the same length as the real ones.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from pycardano import (
    Address, PaymentVerificationKey, Transaction, TransactionBody, TransactionInput,
    TransactionOutput, TransactionWitnessSet, Value, VerificationKeyHash, VerificationKeyWitness
)

from ..runtime.errors import (
    AssemblyError, InsufficientFundsError, OutputTooSmallError, TransactionTooLargeError
)
from .fees import FeePolicy

logger = logging.getLogger(__name__)

MAX_FEE_ITERATIONS = 10

_PLACEHOLDER_VKEY = PaymentVerificationKey(bytes(32))
_PLACEHOLDER_SIGNATURE = bytes(64)


@dataclass(frozen=True)
class KeyInput:
    """An input spent with a vkey witness for ``key_hash``."""
    key_hash: VerificationKeyHash
    transaction_input: TransactionInput
    lovelace: int


class TransactionBuilder:
    """
    Fee-aware builder for ada-only transactions.

    Balance invariant of every body it returns:
    ``sum(inputs) == sum(outputs) + fee``.
    """

    def __init__(self, policy: FeePolicy):
        """
        Initialize builder.

        Args:
            policy: Fee and size policy from the current protocol parameters
        """
        self.policy = policy
        self.inputs: List[KeyInput] = []
        self.outputs: List[TransactionOutput] = []
        self.change_address: Optional[Address] = None

    def add_key_input(self, key_hash: VerificationKeyHash, transaction_input: TransactionInput,
                      lovelace: int) -> TransactionBuilder:
        """Register an input owned by ``key_hash`` holding ``lovelace``."""
        if lovelace <= 0:
            raise AssemblyError(f"Input {transaction_input} has no value")
        self.inputs.append(KeyInput(key_hash, transaction_input, lovelace))
        return self

    def add_output(self, address: Address, lovelace: int) -> TransactionBuilder:
        """Register an explicit ada output."""
        if lovelace <= 0:
            raise AssemblyError(f"Output amount must be positive, got {lovelace}")
        self.outputs.append(TransactionOutput(address, Value(lovelace)))
        return self

    def add_change_if_needed(self, address: Address) -> TransactionBuilder:
        """Send leftover value to ``address`` when it is worth an output."""
        self.change_address = address
        return self

    @property
    def total_input(self) -> int:
        return sum(item.lovelace for item in self.inputs)

    @property
    def total_output(self) -> int:
        return sum(output.amount.coin for output in self.outputs)

    @property
    def required_key_hashes(self) -> List[VerificationKeyHash]:
        """Distinct key hashes that must witness the transaction, in input order."""
        hashes: List[VerificationKeyHash] = []
        for item in self.inputs:
            if item.key_hash not in hashes:
                hashes.append(item.key_hash)
        return hashes

    def build(self) -> TransactionBody:
        """
        Balance and finalize the transaction body.

        Returns:
            Finished transaction body

        Raises:
            InsufficientFundsError: If inputs do not cover outputs plus fee
            OutputTooSmallError: If an explicit output is below the minimum UTxO value
            TransactionTooLargeError: If a size ceiling is exceeded
            AssemblyError: If the builder has nothing to build
        """
        if not self.inputs:
            raise AssemblyError("Transaction has no inputs")
        if not self.outputs:
            raise AssemblyError("Transaction has no outputs")

        for output in self.outputs:
            self._check_output(output)

        leftover = self.total_input - self.total_output
        if leftover < 0:
            raise InsufficientFundsError(details={
                "inputs": str(self.total_input),
                "outputs": str(self.total_output),
            })

        body = self._balance(leftover)

        for output in body.outputs:
            self._check_value_size(output)
        size = self.estimated_size(body)
        if size > self.policy.max_transaction_size:
            raise TransactionTooLargeError(details={
                "size": size,
                "limit": self.policy.max_transaction_size,
            })

        logger.debug(f"Built transaction body: {len(body.outputs)} outputs, fee {body.fee}, {size} bytes")
        return body

    def estimated_size(self, body: TransactionBody) -> int:
        """Serialized size of ``body`` once every required key has signed it."""
        witnesses = [
            VerificationKeyWitness(_PLACEHOLDER_VKEY, _PLACEHOLDER_SIGNATURE)
            for _ in self.required_key_hashes
        ]
        transaction = Transaction(body, TransactionWitnessSet(vkey_witnesses=witnesses))
        return len(transaction.to_cbor())

    def _body(self, outputs: Sequence[TransactionOutput], fee: int) -> TransactionBody:
        return TransactionBody(
            inputs=[item.transaction_input for item in self.inputs],
            outputs=list(outputs),
            fee=fee,
        )

    def _balance(self, leftover: int) -> TransactionBody:
        # Without a change output the whole leftover is paid as fee
        without_change = self._body(self.outputs, leftover)
        required = self.policy.min_fee(self.estimated_size(without_change))
        if leftover < required:
            raise InsufficientFundsError(details={
                "inputs": str(self.total_input),
                "outputs": str(self.total_output),
                "fee": str(required),
            })

        if self.change_address is None:
            return without_change

        fee = required
        for _ in range(MAX_FEE_ITERATIONS):
            change_amount = leftover - fee
            if change_amount <= 0:
                return without_change

            change = TransactionOutput(self.change_address, Value(change_amount))
            if change_amount < self.policy.min_lovelace(change):
                logger.debug(f"Change of {change_amount} lovelace is below the minimum; paying it as fee")
                return without_change

            body = self._body(self.outputs + [change], fee)
            required = self.policy.min_fee(self.estimated_size(body))
            if required <= fee:
                return body
            fee = required

        raise AssemblyError("Fee calculation did not converge", details={"fee": str(fee)})

    def _check_output(self, output: TransactionOutput) -> None:
        minimum = self.policy.min_lovelace(output)
        if output.amount.coin < minimum:
            raise OutputTooSmallError(details={
                "amount": str(output.amount.coin),
                "minimum": str(minimum),
            })
        self._check_value_size(output)

    def _check_value_size(self, output: TransactionOutput) -> None:
        size = self.policy.value_size(output)
        if size > self.policy.max_value_size:
            raise TransactionTooLargeError("Output value too large", details={
                "size": size,
                "limit": self.policy.max_value_size,
            })
