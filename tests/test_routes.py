import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from walletlens.routes import blockchain as blockchain_routes
from walletlens.services.blockchain import BlockchainService
from walletlens.services.dependencies import get_blockchain_service
from walletlens.services.provider import RpcChainProvider
from walletlens.services.registry import ProviderRegistry
from walletlens.services.sources import AlchemySource
from walletlens.utils.blockchain.adapters.evm import EvmBalanceAdapter
from walletlens.utils.blockchain.errors import TransportError
from walletlens.utils.blockchain.strategies.base import BalanceStrategy
from walletlens.utils.blockchain.types import EvmSdkRawBalances, RawFee, RawTokenBalance

TOKEN = "0x1111111111111111111111111111111111111111"
OWNER = "0x000000000000000000000000000000000000dEaD"


class StaticStrategy(BalanceStrategy):
    async def get_raw_balances(self, address, tier):
        return EvmSdkRawBalances(
            native_balance="1000000000000000000",
            token_balances=[RawTokenBalance(TOKEN, "2000000000000000000", {"symbol": "TEST", "decimals": 18, "name": "Test Token"})],
            owned_nfts=[],
        )

    async def get_raw_gas_price(self, tier):
        return RawFee(gas_price="10000000000", max_fee_per_gas="20000000000")

    async def get_raw_estimate_gas(self, tx, tier):
        return "21000"


@pytest.fixture
def rpc(make_rpc):
    return make_rpc({"eth_blockNumber": "0x10", "eth_fail": TransportError("upstream 500")})


@pytest.fixture
def client(ethereum, rpc):
    registry = ProviderRegistry({}, transport=rpc)
    provider = RpcChainProvider(
        ethereum,
        AlchemySource(ethereum, {"ALCHEMY_API_KEY_ETH_MAINNET": "k"}),
        EvmBalanceAdapter(),
        lambda chain, source, tier, credential, request: StaticStrategy(chain),
        rpc,
    )
    registry.register("ethereum", provider)

    app = FastAPI()
    app.include_router(blockchain_routes.router)
    app.dependency_overrides[get_blockchain_service] = lambda: BlockchainService(registry)
    return TestClient(app)


def test_balances(client):
    response = client.get(f"/blockchain/ethereum/{OWNER}/balances")

    assert response.status_code == 200
    assert response.json() == {
        "nativeBalance": {"balance": "1"},
        "tokens": [{
            "mint": TOKEN,
            "balance": "2",
            "tokenMetadata": {"symbol": "TEST", "decimals": 18, "name": "Test Token"},
        }],
        "nfts": [],
    }


def test_balances_unknown_chain_is_404(client):
    response = client.get(f"/blockchain/dogecoin/{OWNER}/balances")

    assert response.status_code == 404


def test_balances_invalid_tier_is_422(client):
    response = client.get(f"/blockchain/ethereum/{OWNER}/balances", params={"tier": "staging"})

    assert response.status_code == 422


def test_balances_unconfigured_tier_degrades(client):
    response = client.get(f"/blockchain/ethereum/{OWNER}/balances", params={"tier": "testnet"})

    assert response.status_code == 200
    assert response.json() == {"nativeBalance": {"balance": "0"}, "tokens": [], "nfts": []}


def test_gas_price(client):
    response = client.get("/blockchain/ethereum/gas-price")

    assert response.status_code == 200
    assert response.json() == {"gasPrice": "20000000000"}


def test_gas_price_without_credential_is_503(client):
    response = client.get("/blockchain/ethereum/gas-price", params={"tier": "testnet"})

    assert response.status_code == 503


def test_estimate_gas(client):
    response = client.post("/blockchain/ethereum/estimate-gas", json={"from": OWNER, "to": TOKEN, "value": "0x0"})

    assert response.status_code == 200
    assert response.json() == {"gas": "21000"}


def test_rpc_passthrough(client, rpc):
    response = client.post("/blockchain/ethereum/rpc", json={"method": "eth_blockNumber", "params": []})

    assert response.status_code == 200
    assert response.json() == "0x10"
    endpoint, _ = rpc.calls[-1]
    assert endpoint == "https://eth-mainnet.g.alchemy.com/v2/k"


def test_rpc_upstream_failure_is_502(client):
    response = client.post("/blockchain/ethereum/rpc", json={"method": "eth_fail"})

    assert response.status_code == 502


def test_health(client):
    assert client.get("/blockchain/ethereum/health").json() == {"chain": "ethereum", "tier": "mainnet", "healthy": True}
    assert client.get("/blockchain/ethereum/health", params={"tier": "testnet"}).json()["healthy"] is False


def test_chains(client):
    response = client.get("/blockchain/chains")

    assert response.status_code == 200
    chains = {chain["id"]: chain for chain in response.json()}
    assert chains["ethereum"]["chainId"] == 1
    assert chains["ethereum"]["supported"] is True
    assert chains["solana"]["nativeSymbol"] == "SOL"
