from .fake_node import FakeWebSocket, FakeNodeSession, result, error, silent
from .factories import (
    MNEMONIC_12, MNEMONIC_24, TX_ID_A, TX_ID_B, TX_ID_C, POLICY_ID, PROTOCOL_PARAMETERS,
    mk_protocol_parameters, mk_protocol_parameters_json, mk_utxo, mk_utxo_json
)

__all__ = [
    "FakeWebSocket",
    "FakeNodeSession",
    "result",
    "error",
    "silent",
    "MNEMONIC_12",
    "MNEMONIC_24",
    "TX_ID_A",
    "TX_ID_B",
    "TX_ID_C",
    "POLICY_ID",
    "PROTOCOL_PARAMETERS",
    "mk_protocol_parameters",
    "mk_protocol_parameters_json",
    "mk_utxo",
    "mk_utxo_json",
]
