import pytest

from walletlens.utils.chains.data import CHAIN_DATA_MAP
from walletlens.utils.types import ChainIdentifier


class FakeRpc:
    """
    RequestFn double. `responses` maps a JSON-RPC method to its result, to an
    exception to raise, or to a callable taking the params.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    async def __call__(self, endpoint, body):
        self.calls.append((endpoint, body))
        value = self.responses.get(body["method"])
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(body["params"])
        return {"jsonrpc": "2.0", "id": body["id"], "result": value}

    def methods(self):
        return [body["method"] for _, body in self.calls]


@pytest.fixture
def make_rpc():
    return FakeRpc


@pytest.fixture
def ethereum():
    return CHAIN_DATA_MAP[ChainIdentifier.ETHEREUM]


@pytest.fixture
def solana():
    return CHAIN_DATA_MAP[ChainIdentifier.SOLANA]
