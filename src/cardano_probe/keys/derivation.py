r"""
Hierarchical deterministic key derivation for Cardano (CIP-1852).

The mnemonic is turned into BIP-39 entropy, the root key is built from that
entropy with an empty passphrase, and the account, payment and staking keys
are derived along a fixed path:

    root / 1852' / 1815' / 0'          account key
    account / 0 / 0                    payment key
    account / 2 / 0                    staking key

The path is policy, not configuration.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from mnemonic import Mnemonic
from pycardano import (
    Address, HDWallet, Network, PaymentExtendedSigningKey, PaymentVerificationKey,
    StakeVerificationKey, VerificationKeyHash
)

from ..runtime.errors import EntropyError

logger = logging.getLogger(__name__)

HARDENED_OFFSET = 0x80000000

PURPOSE = 1852
COIN_TYPE = 1815
ACCOUNT = 0
EXTERNAL_CHAIN = 0
STAKING_CHAIN = 2
ADDRESS_INDEX = 0

MNEMONIC_LANGUAGE = "english"


def harden(index: int) -> int:
    """Return the hardened form of a derivation index."""
    if not 0 <= index < HARDENED_OFFSET:
        raise ValueError(f"derivation index out of range: {index}")
    return HARDENED_OFFSET + index


def is_hardened(index: int) -> bool:
    return index >= HARDENED_OFFSET


@dataclass(frozen=True)
class DerivationPath:
    """Sequence of derivation indexes, hardened ones carry the offset."""

    indexes: Tuple[int, ...]

    @classmethod
    def of(cls, *indexes: int) -> DerivationPath:
        return cls(tuple(indexes))

    def __str__(self) -> str:
        segments = [
            f"{index - HARDENED_OFFSET}'" if is_hardened(index) else str(index)
            for index in self.indexes
        ]
        return "/".join(["m"] + segments)


ACCOUNT_PATH = DerivationPath.of(harden(PURPOSE), harden(COIN_TYPE), harden(ACCOUNT))
PAYMENT_PATH = DerivationPath.of(EXTERNAL_CHAIN, ADDRESS_INDEX)
STAKING_PATH = DerivationPath.of(STAKING_CHAIN, ADDRESS_INDEX)


@dataclass(frozen=True)
class PaymentKeyPair:
    """Payment signing key with its verification key and key hash."""

    signing_key: PaymentExtendedSigningKey
    verification_key: PaymentVerificationKey

    @property
    def key_hash(self) -> VerificationKeyHash:
        return self.verification_key.hash()


@dataclass(frozen=True)
class KeyChain:
    """What survives address construction: the address, payment keys and the staking key hash."""

    address: Address
    payment: PaymentKeyPair
    staking_key_hash: VerificationKeyHash

    @property
    def address_bech32(self) -> str:
        return self.address.encode()


def mnemonic_to_entropy(words: Sequence[str]) -> bytes:
    """
    Convert mnemonic words to BIP-39 entropy.

    Args:
        words: Mnemonic words in order

    Returns:
        Raw entropy bytes

    Raises:
        EntropyError: On unknown words, a wrong word count or a bad checksum
    """
    phrase = " ".join(words)
    try:
        return bytes(Mnemonic(MNEMONIC_LANGUAGE).to_entropy(phrase))
    except (ValueError, LookupError) as e:
        raise EntropyError(f"Invalid mnemonic: {e}", details={"words": len(words)}, cause=e)


def derive_key_chain(words: Sequence[str], network: Network = Network.TESTNET) -> KeyChain:
    """
    Derive the payment and staking keys and the base address.

    Args:
        words: Mnemonic words in order
        network: Network the address belongs to

    Returns:
        Key chain for the first account

    Raises:
        EntropyError: If the mnemonic is malformed
    """
    entropy = mnemonic_to_entropy(words)
    root = HDWallet.from_entropy(entropy.hex())

    account = root.derive_from_path(str(ACCOUNT_PATH))
    payment = account.derive_from_path(str(PAYMENT_PATH))
    staking = account.derive_from_path(str(STAKING_PATH))

    payment_pair = PaymentKeyPair(
        signing_key=PaymentExtendedSigningKey.from_hdwallet(payment),
        verification_key=PaymentVerificationKey.from_primitive(payment.public_key),
    )
    staking_key_hash = StakeVerificationKey.from_primitive(staking.public_key).hash()

    address = Address(payment_part=payment_pair.key_hash, staking_part=staking_key_hash, network=network)
    logger.debug(f"Derived base address {address} from {ACCOUNT_PATH}")

    return KeyChain(address=address, payment=payment_pair, staking_key_hash=staking_key_hash)


def derive_address(words: Sequence[str], network: Network = Network.TESTNET) -> Tuple[Address, PaymentKeyPair]:
    """Derive the base address and the payment key pair for a mnemonic."""
    chain = derive_key_chain(words, network)
    return chain.address, chain.payment
