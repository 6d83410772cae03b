"""
Probe entry point.

Derives the wallet address, opens a node session, spends one pure-ada UTxO
into a one ADA self-payment plus change, signs and submits it. Every failure
ends the run.
"""

import asyncio
import logging
import os
from typing import Optional

from .client import LedgerStateQueryClient, TransactionSubmissionClient
from .config import EnvData, load_env
from .keys import derive_key_chain
from .runtime.codec import encode_log_json
from .runtime.errors import ProbeError
from .transport import open_session
from .tx import ADA_TO_LOVELACE, FeePolicy, TransactionBuilder, select_utxo, sign_transaction

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def error_handler(error: BaseException) -> None:
    """Long-lived session error handler."""
    logger.error(f"Catch error! Reason: {error}", exc_info=error)


def close_handler(code: int, reason: str) -> None:
    """Long-lived session close handler."""
    logger.info(f"Connection is close! Status: {code}, reason: {reason}")


async def run(env: EnvData, transfer_amount: int = ADA_TO_LOVELACE) -> str:
    """
    Build, sign and submit one self-payment.

    Args:
        env: Validated configuration
        transfer_amount: Lovelace paid back to the wallet's own address

    Returns:
        Transaction id reported by the node
    """
    chain = derive_key_chain(env.mnemonic, env.cardano_network)
    address = chain.address_bech32
    logger.info(f"address: {address}")

    session = await open_session(env.connection_config(), error_handler, close_handler)
    async with session:
        ledger = LedgerStateQueryClient(session)
        parameters = await ledger.protocol_parameters()
        builder = TransactionBuilder(FeePolicy.from_protocol_parameters(parameters))

        utxos = await ledger.utxo([address])
        utxo = select_utxo(utxos)
        logger.info(f"UTXO: {encode_log_json(utxo.to_log_dict())}")

        builder.add_key_input(chain.payment.key_hash, utxo.to_transaction_input(), utxo.lovelace)
        builder.add_output(chain.address, transfer_amount)
        builder.add_change_if_needed(chain.address)
        body = builder.build()

        transaction = sign_transaction(body, chain.payment)

        submission = TransactionSubmissionClient(session)
        tx_id = await submission.submit_transaction(transaction.to_cbor_hex())

    logger.info(f"Transaction id: {tx_id}")
    return tx_id


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=(level or "INFO").upper(), format=LOG_FORMAT)


def main() -> int:
    """Run the probe once; returns the process exit status."""
    configure_logging(os.environ.get("LOG_LEVEL"))

    try:
        env = load_env()
        asyncio.run(run(env))
    except ProbeError as e:
        logger.error(f"Probe failed! Reason: {e.message}", exc_info=e)
        if e.details:
            logger.error(f"Details: {encode_log_json(e.details, indent=None)}")
        return 1

    return 0
