"""
End-to-end probe run against a scripted node.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from pycardano import Transaction, Value

from helpers import POLICY_ID, TX_ID_A, TX_ID_B, FakeWebSocket, mk_protocol_parameters_json, mk_utxo_json, result

from cardano_probe import app
from cardano_probe.client.ledger import PROTOCOL_PARAMETERS_METHOD, UTXO_METHOD
from cardano_probe.client.submission import SUBMIT_METHOD
from cardano_probe.config import load_env
from cardano_probe.runtime.errors import NoUsableOutputError, NodeNotReadyError, SubmissionError
from cardano_probe.transport import ServerHealth
from cardano_probe.transport import session as session_module
from cardano_probe.tx import verify_witness

READY = ServerHealth.model_validate({"lastTipUpdate": "2024-01-01T00:00:00Z"})


def coin_of(output) -> int:
    amount = output.amount
    return amount.coin if isinstance(amount, Value) else amount


def accept_transaction(params):
    """Answer like a node that accepted the transaction."""
    transaction = Transaction.from_cbor(params["transaction"]["cbor"])
    return {"result": {"transaction": {"id": transaction.transaction_body.hash().hex()}}}


def make_node(utxos):
    def utxo_handler(params):
        address = params["addresses"][0]
        return {"result": [dict(utxo, address=address) for utxo in utxos]}

    return FakeWebSocket({
        PROTOCOL_PARAMETERS_METHOD: result(mk_protocol_parameters_json()),
        UTXO_METHOD: utxo_handler,
        SUBMIT_METHOD: accept_transaction,
    })


def patched_node(websocket, health=READY):
    return (
        patch.object(session_module, "get_server_health", AsyncMock(return_value=health)),
        patch.object(session_module.NodeSession, "_create_connection", AsyncMock(return_value=websocket)),
    )


@pytest.mark.asyncio
async def test_self_payment_end_to_end(env, key_chain, caplog):
    """Test the probe pays one ADA back to itself with change and one witness."""
    websocket = make_node([
        mk_utxo_json(5_000_000, tx_id=TX_ID_A, assets={POLICY_ID: {"746f6b656e": 1}}),
        mk_utxo_json(10_000_000, tx_id=TX_ID_B, index=3),
    ])
    health_patch, connect_patch = patched_node(websocket)

    caplog.set_level(logging.INFO, logger="cardano_probe")
    with health_patch, connect_patch:
        tx_id = await app.run(env)

    assert websocket.methods() == [PROTOCOL_PARAMETERS_METHOD, UTXO_METHOD, SUBMIT_METHOD]
    assert websocket.sent[1]["params"] == {"addresses": [key_chain.address_bech32]}
    assert websocket.closed

    transaction = Transaction.from_cbor(websocket.sent[2]["params"]["transaction"]["cbor"])
    body = transaction.transaction_body
    assert tx_id == body.hash().hex()

    inputs = list(body.inputs)
    assert len(inputs) == 1
    assert inputs[0].transaction_id.payload == bytes.fromhex(TX_ID_B)
    assert inputs[0].index == 3

    payment, change = body.outputs
    assert payment.address == key_chain.address
    assert coin_of(payment) == 1_000_000
    assert change.address == key_chain.address
    assert coin_of(change) == 9_000_000 - body.fee
    assert 150_000 < body.fee < 200_000

    witnesses = list(transaction.transaction_witness_set.vkey_witnesses)
    assert len(witnesses) == 1
    assert witnesses[0].vkey.hash() == key_chain.payment.key_hash
    assert verify_witness(witnesses[0], body.hash())

    messages = [record.getMessage() for record in caplog.records]
    assert f"address: {key_chain.address_bech32}" in messages
    assert f"Transaction id: {tx_id}" in messages
    assert any(message.startswith("UTXO: ") for message in messages)


@pytest.mark.asyncio
async def test_no_usable_utxo(env):
    websocket = make_node([mk_utxo_json(900_000, tx_id=TX_ID_A)])
    health_patch, connect_patch = patched_node(websocket)

    with health_patch, connect_patch:
        with pytest.raises(NoUsableOutputError):
            await app.run(env)

    assert SUBMIT_METHOD not in websocket.methods()
    assert websocket.closed


@pytest.mark.asyncio
async def test_node_not_ready(env):
    websocket = make_node([])
    not_ready = ServerHealth.model_validate({"lastTipUpdate": None})
    health_patch, connect_patch = patched_node(websocket, not_ready)

    with health_patch, connect_patch as connect:
        with pytest.raises(NodeNotReadyError):
            await app.run(env)

    connect.assert_not_called()
    assert websocket.sent == []


@pytest.mark.asyncio
async def test_submission_rejected(env):
    websocket = make_node([mk_utxo_json(10_000_000, tx_id=TX_ID_A)])
    websocket.handlers[SUBMIT_METHOD] = lambda params: {
        "error": {"code": 3117, "message": "Unknown UTxO references"},
    }
    health_patch, connect_patch = patched_node(websocket)

    with health_patch, connect_patch:
        with pytest.raises(SubmissionError):
            await app.run(env)


def test_main_exit_codes(monkeypatch, env):
    monkeypatch.setattr(app, "configure_logging", lambda level=None: None)
    monkeypatch.setattr(app, "load_env", lambda: env)

    with patch.object(app, "run", AsyncMock(return_value=TX_ID_A)) as run:
        assert app.main() == 0
    run.assert_awaited_once_with(env)

    with patch.object(app, "run", AsyncMock(side_effect=NoUsableOutputError(details={"candidates": 0}))):
        assert app.main() == 1


def test_main_reports_configuration_error(monkeypatch):
    monkeypatch.setattr(app, "configure_logging", lambda level=None: None)
    monkeypatch.setattr(app, "load_env", lambda: load_env(environ={}, dotenv=False))

    with patch.object(app, "run", AsyncMock()) as run:
        assert app.main() == 1

    run.assert_not_called()
