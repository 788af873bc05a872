import pytest

from walletlens.utils.blockchain.errors import TransportError
from walletlens.utils.blockchain.transport import rpc_call


class EnvelopeRequest:
    def __init__(self, envelope):
        self.envelope = envelope
        self.bodies = []

    async def __call__(self, endpoint, body):
        self.bodies.append(body)
        return self.envelope


@pytest.mark.asyncio
async def test_rpc_call_builds_envelope_and_returns_result():
    request = EnvelopeRequest({"jsonrpc": "2.0", "id": 1, "result": "0x10"})

    assert await rpc_call(request, "https://rpc.example", "eth_blockNumber") == "0x10"
    assert request.bodies == [{"id": 1, "jsonrpc": "2.0", "method": "eth_blockNumber", "params": []}]


@pytest.mark.asyncio
async def test_rpc_call_keeps_null_results():
    request = EnvelopeRequest({"jsonrpc": "2.0", "id": 1, "result": None})

    assert await rpc_call(request, "https://rpc.example", "getAccountInfo", ["x"]) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("envelope", [
    {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}},
    {"jsonrpc": "2.0", "id": 1},
    ["not", "an", "object"],
])
async def test_rpc_call_rejects_bad_envelopes(envelope):
    with pytest.raises(TransportError):
        await rpc_call(EnvelopeRequest(envelope), "https://rpc.example", "eth_blockNumber")
