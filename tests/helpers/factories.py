"""
Factories for ledger state test data in Ogmios v6 shape.
"""

import copy
from typing import Any, Dict, Optional

from cardano_probe.models import ProtocolParameters, UnspentOutput

# BIP-39 test vectors: all-zero entropy
MNEMONIC_12 = ["abandon"] * 11 + ["about"]
MNEMONIC_24 = ["abandon"] * 23 + ["art"]

TX_ID_A = "a" * 64
TX_ID_B = "b" * 64
TX_ID_C = "c" * 64

POLICY_ID = "d" * 56

PROTOCOL_PARAMETERS: Dict[str, Any] = {
    "minFeeCoefficient": 44,
    "minFeeConstant": {"ada": {"lovelace": 155381}},
    "minFeeReferenceScripts": {"range": 25600, "base": 15.0, "multiplier": 1.2},
    "maxBlockBodySize": {"bytes": 90112},
    "maxBlockHeaderSize": {"bytes": 1100},
    "maxTransactionSize": {"bytes": 16384},
    "stakeCredentialDeposit": {"ada": {"lovelace": 2000000}},
    "stakePoolDeposit": {"ada": {"lovelace": 500000000}},
    "minUtxoDepositCoefficient": 4310,
    "maxValueSize": {"bytes": 5000},
    "collateralPercentage": 150,
    "maxCollateralInputs": 3,
    "version": {"major": 9, "minor": 0},
}


def mk_protocol_parameters_json(**overrides: Any) -> Dict[str, Any]:
    """Protocol parameters document; ``None`` overrides remove the key."""
    document = copy.deepcopy(PROTOCOL_PARAMETERS)
    for key, value in overrides.items():
        if value is None:
            document.pop(key, None)
        else:
            document[key] = value
    return document


def mk_protocol_parameters(**overrides: Any) -> ProtocolParameters:
    return ProtocolParameters.model_validate(mk_protocol_parameters_json(**overrides))


def mk_utxo_json(lovelace: int, tx_id: str = TX_ID_A, index: int = 0,
                 address: str = "addr_test1_placeholder",
                 assets: Optional[Dict[str, Dict[str, int]]] = None) -> Dict[str, Any]:
    value: Dict[str, Dict[str, int]] = {"ada": {"lovelace": lovelace}}
    if assets:
        value.update(assets)
    return {
        "transaction": {"id": tx_id},
        "index": index,
        "address": address,
        "value": value,
    }


def mk_utxo(lovelace: int, **kwargs: Any) -> UnspentOutput:
    return UnspentOutput.model_validate(mk_utxo_json(lovelace, **kwargs))
