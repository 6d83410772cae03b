"""
Witnessing of finished transaction bodies.

Assembly and signing are separate failure domains: anything raised here is a
SigningError, never an assembly error.
"""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from pycardano import Transaction, TransactionBody, TransactionWitnessSet, VerificationKeyWitness

from ..keys.derivation import PaymentKeyPair
from ..runtime.errors import SigningError

logger = logging.getLogger(__name__)


def make_vkey_witness(tx_hash: bytes, key_pair: PaymentKeyPair) -> VerificationKeyWitness:
    """
    Sign a transaction hash with the payment key.

    Args:
        tx_hash: 32-byte transaction body hash
        key_pair: Payment key pair

    Returns:
        Witness holding the verification key and the signature

    Raises:
        SigningError: If the key cannot sign
    """
    if len(tx_hash) != 32:
        raise SigningError(f"Transaction hash must be 32 bytes, got {len(tx_hash)}")
    try:
        signature = key_pair.signing_key.sign(tx_hash)
    except Exception as e:
        raise SigningError(f"Failed to sign transaction: {e}", cause=e)
    return VerificationKeyWitness(key_pair.verification_key, signature)


def verify_witness(witness: VerificationKeyWitness, tx_hash: bytes) -> bool:
    """
    Verify a vkey witness against a transaction hash.

    Args:
        witness: Witness to check
        tx_hash: Hash the witness should cover

    Returns:
        True if the signature is valid for the witness key
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(witness.vkey.payload)
        public_key.verify(witness.signature, tx_hash)
        return True
    except (InvalidSignature, ValueError):
        return False


def sign_transaction(body: TransactionBody, key_pair: PaymentKeyPair) -> Transaction:
    """
    Produce the signed transaction.

    Exactly one witness, from the payment key, over the body hash. No staking,
    script or metadata witnesses.

    Args:
        body: Finished transaction body
        key_pair: Payment key pair

    Returns:
        Signed transaction ready for submission

    Raises:
        SigningError: If the witness cannot be produced or does not verify
    """
    tx_hash = body.hash()
    witness = make_vkey_witness(tx_hash, key_pair)
    if not verify_witness(witness, tx_hash):
        raise SigningError("Produced witness does not verify", details={"tx_hash": tx_hash.hex()})

    logger.debug(f"Signed transaction {tx_hash.hex()}")
    return Transaction(body, TransactionWitnessSet(vkey_witnesses=[witness]))
