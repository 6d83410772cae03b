"""
Cardano Probe

Derives a CIP-1852 wallet address from a mnemonic and proves the wallet is
spendable by submitting a one ADA self-payment through an Ogmios node.
"""

from .config import EnvData, load_env, parse_string_to_array
from .models import ProtocolParameters, UnspentOutput
from .keys import KeyChain, PaymentKeyPair, derive_address, derive_key_chain
from .transport import NodeSession, SessionState, open_session
from .client import LedgerStateQueryClient, TransactionSubmissionClient
from .tx import FeePolicy, TransactionBuilder, select_utxo, sign_transaction, verify_witness
from .runtime.errors import *

__version__ = "0.1.0"
__all__ = [
    "EnvData",
    "load_env",
    "parse_string_to_array",
    "ProtocolParameters",
    "UnspentOutput",
    "KeyChain",
    "PaymentKeyPair",
    "derive_address",
    "derive_key_chain",
    "NodeSession",
    "SessionState",
    "open_session",
    "LedgerStateQueryClient",
    "TransactionSubmissionClient",
    "FeePolicy",
    "TransactionBuilder",
    "select_utxo",
    "sign_transaction",
    "verify_witness",
    "ProbeError",
    "ConfigurationError",
    "EntropyError",
    "NodeNotReadyError",
    "SessionError",
    "SessionClosedError",
    "QueryError",
    "NoUsableOutputError",
    "AssemblyError",
    "InsufficientFundsError",
    "SigningError",
    "SubmissionError",
]
