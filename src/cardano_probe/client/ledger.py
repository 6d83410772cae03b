"""
Ledger state queries over a node session.
"""

import logging
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from ..models import ProtocolParameters, UnspentOutput
from ..runtime.errors import ErrorCode, QueryError
from ..transport.session import NodeSession

logger = logging.getLogger(__name__)

PROTOCOL_PARAMETERS_METHOD = "queryLedgerState/protocolParameters"
UTXO_METHOD = "queryLedgerState/utxo"

_UTXO_LIST = TypeAdapter(List[UnspentOutput])


class LedgerStateQueryClient:
    """Single-shot ledger state queries; no pagination, no retries."""

    def __init__(self, session: NodeSession):
        self.session = session

    async def protocol_parameters(self) -> ProtocolParameters:
        """
        Fetch the current protocol parameter snapshot.

        Raises:
            QueryError: If the node fails the query or the result is malformed
        """
        result = await self.session.request(PROTOCOL_PARAMETERS_METHOD)
        try:
            return ProtocolParameters.model_validate(result)
        except ValidationError as e:
            raise QueryError("Malformed protocol parameters", ErrorCode.MALFORMED_RESPONSE,
                             details={"method": PROTOCOL_PARAMETERS_METHOD}, cause=e)

    async def utxo(self, addresses: Sequence[str]) -> List[UnspentOutput]:
        """
        Fetch the unspent outputs owned by ``addresses``.

        Args:
            addresses: Bech32 addresses

        Returns:
            Outputs in the order the node returned them

        Raises:
            QueryError: If the node fails the query or the result is malformed
        """
        result = await self.session.request(UTXO_METHOD, {"addresses": list(addresses)})
        try:
            utxos = _UTXO_LIST.validate_python(result)
        except ValidationError as e:
            raise QueryError("Malformed UTxO list", ErrorCode.MALFORMED_RESPONSE,
                             details={"method": UTXO_METHOD}, cause=e)

        logger.debug(f"Node returned {len(utxos)} UTxOs")
        return utxos
