"""
Test bootstrap:
- Make ``tests/helpers`` importable as ``helpers``
- Shared fixtures for keys, fee policy and configuration
"""
import sys
import pathlib

import pytest

TESTS_DIR = pathlib.Path(__file__).parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import MNEMONIC_12, mk_protocol_parameters  # noqa: E402

from cardano_probe.config import EnvData  # noqa: E402
from cardano_probe.keys import derive_key_chain  # noqa: E402
from cardano_probe.tx import FeePolicy  # noqa: E402


@pytest.fixture(scope="session")
def key_chain():
    """Deterministic key chain for the all-zero entropy test mnemonic."""
    return derive_key_chain(MNEMONIC_12)


@pytest.fixture
def protocol_parameters():
    return mk_protocol_parameters()


@pytest.fixture
def fee_policy(protocol_parameters):
    return FeePolicy.from_protocol_parameters(protocol_parameters)


@pytest.fixture
def env():
    return EnvData(host="localhost", port=1337, mnemonic=MNEMONIC_12)
