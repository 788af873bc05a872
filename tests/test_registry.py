import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from walletlens.models.schemas.balances import BalancesResponse
from walletlens.services import registry as registry_module
from walletlens.services.blockchain import BlockchainService
from walletlens.services.provider import ChainProvider, ProviderState, RpcChainProvider
from walletlens.services.registry import ProviderRegistry
from walletlens.services.sources import AlchemySource, RpcSource
from walletlens.utils.blockchain.adapters.evm import EvmBalanceAdapter
from walletlens.utils.blockchain.errors import UnsupportedChainError
from walletlens.utils.blockchain.strategies.base import BalanceStrategy
from walletlens.utils.types import ChainIdentifier, NetworkTier, ServiceType


class ClosableStrategy(BalanceStrategy):
    closed = False

    async def get_raw_balances(self, address, tier):
        raise NotImplementedError

    async def get_raw_gas_price(self, tier):
        raise NotImplementedError

    async def get_raw_estimate_gas(self, tx, tier):
        raise NotImplementedError

    async def close(self):
        self.closed = True


def test_resolve_returns_cached_instance(make_rpc):
    registry = ProviderRegistry({"ALCHEMY_API_KEY": "k"}, transport=make_rpc())

    first = registry.resolve("ethereum")

    assert registry.resolve(ChainIdentifier.ETHEREUM) is first
    assert registry.resolve(" Ethereum ") is first
    assert isinstance(first, RpcChainProvider)
    assert registry.registered_chains() == ["ethereum"]


def test_resolve_unknown_chain_raises(make_rpc):
    registry = ProviderRegistry({}, transport=make_rpc())

    with pytest.raises(UnsupportedChainError):
        registry.resolve("unknown-chain")
    assert registry.is_chain_supported("unknown-chain") is False


def test_concurrent_cold_start_builds_one_provider(make_rpc, monkeypatch):
    registry = ProviderRegistry({"ALCHEMY_API_KEY": "k"}, transport=make_rpc())
    built = []
    original_build = registry._build

    def slow_build(identifier):
        built.append(identifier)
        time.sleep(0.05)
        return original_build(identifier)

    monkeypatch.setattr(registry, "_build", slow_build)

    with ThreadPoolExecutor(max_workers=8) as pool:
        providers = list(pool.map(lambda _: registry.resolve("ethereum"), range(16)))

    assert len(built) == 1
    assert all(provider is providers[0] for provider in providers)


@pytest.mark.parametrize("config, chain, expected", [
    ({"ALCHEMY_API_KEY": "k"}, "ethereum", "alchemy"),
    ({"QUICKNODE_ETH_URL": "https://qn.example/abc"}, "ethereum", "quicknode"),
    ({}, "ethereum", "rpc"),
    ({"ALCHEMY_API_KEY": "k"}, "bsc", "rpc"),
    ({"QUICKNODE_BSC_MAINNET_URL": "https://qn.example/bsc"}, "bsc", "quicknode"),
    ({"ALCHEMY_API_KEY_SOL": "k"}, "solana", "alchemy"),
])
def test_first_configured_source_wins(make_rpc, config, chain, expected):
    registry = ProviderRegistry(config, transport=make_rpc())

    assert registry.resolve(chain).provider_name == expected


@pytest.mark.asyncio
async def test_unconfigured_route_is_cached_and_degrades(make_rpc, monkeypatch):
    monkeypatch.setitem(registry_module.PROVIDER_ROUTES, ChainIdentifier.ETHEREUM, [ServiceType.ALCHEMY])
    registry = ProviderRegistry({}, transport=make_rpc())

    provider = registry.resolve("ethereum")

    assert provider.provider_name == "alchemy"
    assert provider.is_supported() is False
    assert provider.state == ProviderState.UNCONFIGURED
    assert registry.is_chain_supported("ethereum") is False
    assert await provider.get_balances("0x000000000000000000000000000000000000dEaD") == BalancesResponse.empty()


@pytest.mark.asyncio
async def test_manual_registration_and_close(ethereum, make_rpc):
    registry = ProviderRegistry({}, transport=make_rpc())
    strategy = ClosableStrategy(ethereum)
    provider = ChainProvider(
        ethereum,
        AlchemySource(ethereum, {"ALCHEMY_API_KEY": "k"}),
        EvmBalanceAdapter(),
        lambda *args: strategy,
        registry.transport,
    )

    registry.register("TestChain", provider)
    assert registry.resolve("testchain") is provider

    provider.get_strategy(NetworkTier.MAINNET)
    await registry.close()
    assert strategy.closed is True


def test_list_chains_reports_support(make_rpc, monkeypatch):
    monkeypatch.setitem(registry_module.PROVIDER_ROUTES, ChainIdentifier.BASE, [ServiceType.ALCHEMY])
    service = BlockchainService(ProviderRegistry({}, transport=make_rpc()))

    chains = {summary.id: summary for summary in service.list_chains()}

    assert set(chains) == {identifier.value for identifier in ChainIdentifier}
    assert chains["ethereum"].supported is True
    assert chains["base"].supported is False
    assert chains["solana"].native_decimals == 9
    assert service.get_chain_config("polygon").chain_id == 137


@pytest.mark.asyncio
async def test_each_tier_falls_back_to_its_own_source(make_rpc):
    rpc = make_rpc({"eth_getBalance": "0xde0b6b3a7640000"})
    registry = ProviderRegistry({"ALCHEMY_API_KEY_ETH_MAINNET": "k"}, transport=rpc)

    provider = registry.resolve("ethereum")

    assert provider.provider_name == "alchemy"
    assert provider.get_source(NetworkTier.MAINNET).name == "alchemy"
    assert provider.get_source(NetworkTier.TESTNET).name == "rpc"
    assert provider.get_rpc_endpoint(NetworkTier.TESTNET) == "https://eth-sepolia.public.blastapi.io"

    response = await provider.get_balances("0x000000000000000000000000000000000000dEaD", NetworkTier.TESTNET)

    assert response.native_balance.balance == "1"
    assert rpc.methods() == ["eth_getBalance"]
    assert rpc.calls[0][0] == "https://eth-sepolia.public.blastapi.io"


def test_tier_skips_source_without_a_network_for_it(ethereum, make_rpc):
    chain = ethereum.model_copy(update={"aliases": None})
    provider = RpcChainProvider(
        chain,
        AlchemySource(chain, {"ALCHEMY_API_KEY": "k"}),
        EvmBalanceAdapter(),
        lambda *args: None,
        make_rpc(),
        fallbacks=[(RpcSource(chain, {}), lambda *args: None)],
    )

    assert provider.get_source(NetworkTier.MAINNET).name == "rpc"
    assert provider.get_base_url(NetworkTier.MAINNET) == "https://eth-mainnet.public.blastapi.io"
