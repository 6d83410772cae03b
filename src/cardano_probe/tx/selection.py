"""
UTxO selection.

The probe spends exactly one output: the first one, in the order the node
returned them, that holds only ada and more than one ADA.
"""

import logging
from typing import Iterable

from ..models import UnspentOutput
from ..runtime.errors import NoUsableOutputError

logger = logging.getLogger(__name__)

ADA_TO_LOVELACE = 1_000_000


def is_usable(utxo: UnspentOutput, minimum: int = ADA_TO_LOVELACE) -> bool:
    """Pure ada and strictly above ``minimum`` lovelace."""
    return utxo.is_pure_ada() and utxo.lovelace > minimum


def select_utxo(utxos: Iterable[UnspentOutput], minimum: int = ADA_TO_LOVELACE) -> UnspentOutput:
    """
    Pick the first usable output.

    Args:
        utxos: Outputs in node order
        minimum: Exclusive lovelace floor

    Returns:
        The selected output

    Raises:
        NoUsableOutputError: If no output qualifies
    """
    seen = 0
    for utxo in utxos:
        seen += 1
        if is_usable(utxo, minimum):
            logger.debug(f"Selected {utxo} with {utxo.lovelace} lovelace")
            return utxo

    raise NoUsableOutputError(details={"candidates": seen, "minimum": str(minimum)})
