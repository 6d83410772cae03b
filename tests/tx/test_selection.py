"""
Test UTxO selection and ledger state models.
"""

import pytest
from pydantic import ValidationError

from helpers import POLICY_ID, TX_ID_A, TX_ID_B, TX_ID_C, mk_utxo, mk_utxo_json

from cardano_probe.models import UnspentOutput
from cardano_probe.runtime.errors import ErrorCode, NoUsableOutputError
from cardano_probe.tx import ADA_TO_LOVELACE, is_usable, select_utxo

TOKENS = {POLICY_ID: {"746f6b656e": 5}}


class TestUnspentOutput:
    """Test the UnspentOutput model."""

    def test_parse_ogmios_shape(self):
        utxo = mk_utxo(3_000_000, tx_id=TX_ID_B, index=2)

        assert utxo.transaction_id == TX_ID_B
        assert utxo.index == 2
        assert utxo.lovelace == 3_000_000
        assert str(utxo) == f"{TX_ID_B}#2"

    def test_transaction_id_is_lowercased(self):
        utxo = mk_utxo(3_000_000, tx_id="AB" * 32)
        assert utxo.transaction_id == "ab" * 32

    @pytest.mark.parametrize("tx_id", ["", "zz" * 32, "ab" * 31])
    def test_bad_transaction_id(self, tx_id):
        with pytest.raises(ValidationError):
            UnspentOutput.model_validate(mk_utxo_json(3_000_000, tx_id=tx_id))

    def test_negative_index(self):
        with pytest.raises(ValidationError):
            UnspentOutput.model_validate(mk_utxo_json(3_000_000, index=-1))

    def test_pure_ada(self):
        assert mk_utxo(3_000_000).is_pure_ada()
        assert not mk_utxo(3_000_000, assets=TOKENS).is_pure_ada()

    def test_transaction_input(self):
        tx_input = mk_utxo(3_000_000, tx_id=TX_ID_C, index=1).to_transaction_input()

        assert tx_input.transaction_id.payload == bytes.fromhex(TX_ID_C)
        assert tx_input.index == 1

    def test_extra_fields_are_kept(self):
        data = mk_utxo_json(3_000_000)
        data["datumHash"] = "00" * 32
        utxo = UnspentOutput.model_validate(data)

        assert utxo.to_log_dict()["datumHash"] == "00" * 32


class TestSelectUtxo:
    """Test first-match selection."""

    def test_skips_multi_asset_output(self):
        """A 5 ADA output with tokens is skipped in favour of a 3 ADA pure output."""
        utxos = [
            mk_utxo(5_000_000, tx_id=TX_ID_A, assets=TOKENS),
            mk_utxo(3_000_000, tx_id=TX_ID_B),
        ]

        assert select_utxo(utxos).transaction_id == TX_ID_B

    def test_all_below_threshold(self):
        utxos = [mk_utxo(500_000, tx_id=TX_ID_A), mk_utxo(900_000, tx_id=TX_ID_B)]

        with pytest.raises(NoUsableOutputError) as exc_info:
            select_utxo(utxos)

        assert exc_info.value.code == ErrorCode.NO_USABLE_OUTPUT
        assert exc_info.value.message == "Address should have at least 1 utxo with ada!"
        assert exc_info.value.details == {"candidates": 2, "minimum": "1000000"}

    def test_exactly_one_ada_is_not_enough(self):
        assert not is_usable(mk_utxo(ADA_TO_LOVELACE))
        assert is_usable(mk_utxo(ADA_TO_LOVELACE + 1))

    def test_empty_set(self):
        with pytest.raises(NoUsableOutputError):
            select_utxo([])

    def test_first_match_in_node_order(self):
        utxos = [
            mk_utxo(2_000_000, tx_id=TX_ID_A),
            mk_utxo(50_000_000, tx_id=TX_ID_B),
        ]

        assert select_utxo(utxos).transaction_id == TX_ID_A
        assert select_utxo(list(reversed(utxos))).transaction_id == TX_ID_B

    def test_stable_across_calls(self):
        utxos = [mk_utxo(2_000_000, tx_id=TX_ID_A, index=i) for i in range(3)]

        assert select_utxo(utxos) == select_utxo(utxos)
        assert select_utxo(utxos).index == 0

    def test_custom_minimum(self):
        utxos = [mk_utxo(2_000_000, tx_id=TX_ID_A), mk_utxo(6_000_000, tx_id=TX_ID_B)]

        assert select_utxo(utxos, minimum=5_000_000).transaction_id == TX_ID_B
