"""
Transaction submission over a node session.
"""

from ..runtime.errors import ErrorCode, QueryError
from ..transport.session import NodeSession

SUBMIT_METHOD = "submitTransaction"


class TransactionSubmissionClient:
    """Submits serialized transactions; no confirmation polling, no resubmission."""

    def __init__(self, session: NodeSession):
        self.session = session

    async def submit_transaction(self, cbor_hex: str) -> str:
        """
        Submit a signed transaction.

        Args:
            cbor_hex: Hex encoded CBOR of the signed transaction

        Returns:
            Transaction id reported by the node

        Raises:
            SubmissionError: If the node rejects the transaction
            QueryError: If the node's answer has no transaction id
        """
        result = await self.session.request(SUBMIT_METHOD, {"transaction": {"cbor": cbor_hex}})

        transaction = result.get("transaction") if isinstance(result, dict) else None
        tx_id = transaction.get("id") if isinstance(transaction, dict) else None
        if not isinstance(tx_id, str) or not tx_id:
            raise QueryError("Submission response carries no transaction id",
                             ErrorCode.MALFORMED_RESPONSE, details={"response": result})
        return tx_id
