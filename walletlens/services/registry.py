import threading
from typing import Dict, List, Optional, Tuple, Type, Union

from walletlens.services.provider import ChainProvider, RpcChainProvider, StrategyBuilder
from walletlens.services.sources import DATA_SOURCES, AlchemySource, DataSource
from walletlens.utils.blockchain.adapters.base import BalanceAdapter
from walletlens.utils.blockchain.adapters.evm import EvmBalanceAdapter
from walletlens.utils.blockchain.adapters.solana import SolanaBalanceAdapter
from walletlens.utils.blockchain.alchemy import AlchemyClient
from walletlens.utils.blockchain.errors import UnsupportedChainError
from walletlens.utils.blockchain.strategies.base import BalanceStrategy
from walletlens.utils.blockchain.strategies.evm_alchemy import EvmAlchemyStrategy
from walletlens.utils.blockchain.strategies.evm_rpc import EvmRpcStrategy
from walletlens.utils.blockchain.strategies.solana_rpc import SolanaRpcStrategy
from walletlens.utils.blockchain.transport import AiohttpTransport
from walletlens.utils.chains.queries import get_chain_by_identifier, to_chain_identifier
from walletlens.utils.chains.types import Chain
from walletlens.utils.logging import get_logger
from walletlens.utils.types import ChainFamily, ChainIdentifier, ConfigSource, NetworkTier, RequestFn, ServiceType

logger = get_logger(__name__)


def build_evm_alchemy(
    chain: Chain, source: DataSource, tier: NetworkTier, credential: str, request: RequestFn
) -> BalanceStrategy:
    if not isinstance(source, AlchemySource):
        raise TypeError(f"Alchemy strategy needs an AlchemySource, got {type(source).__name__}")
    return EvmAlchemyStrategy(chain, AlchemyClient(source.network(tier), credential))


def build_evm_quicknode(
    chain: Chain, source: DataSource, tier: NetworkTier, credential: str, request: RequestFn
) -> BalanceStrategy:
    return EvmRpcStrategy(chain, request, source.base_url(tier, credential), addons=True)


def build_evm_rpc(
    chain: Chain, source: DataSource, tier: NetworkTier, credential: str, request: RequestFn
) -> BalanceStrategy:
    return EvmRpcStrategy(chain, request, source.base_url(tier, credential), addons=False)


def build_solana_rpc(
    chain: Chain, source: DataSource, tier: NetworkTier, credential: str, request: RequestFn
) -> BalanceStrategy:
    return SolanaRpcStrategy(chain, request, source.base_url(tier, credential))


# Source preference per chain. Each tier uses the first source configured for it.
PROVIDER_ROUTES: Dict[ChainIdentifier, List[ServiceType]] = {
    ChainIdentifier.ETHEREUM: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.POLYGON: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.BSC: [ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.BASE: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.ARBITRUM: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.OPTIMISM: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
    ChainIdentifier.SOLANA: [ServiceType.ALCHEMY, ServiceType.QUICKNODE, ServiceType.RPC],
}

FAMILY_IMPLEMENTATIONS: Dict[ChainFamily, Tuple[Type[BalanceAdapter], Dict[ServiceType, StrategyBuilder]]] = {
    ChainFamily.EVM: (
        EvmBalanceAdapter,
        {
            ServiceType.ALCHEMY: build_evm_alchemy,
            ServiceType.QUICKNODE: build_evm_quicknode,
            ServiceType.RPC: build_evm_rpc,
        },
    ),
    ChainFamily.SOL: (
        SolanaBalanceAdapter,
        {
            ServiceType.ALCHEMY: build_solana_rpc,
            ServiceType.QUICKNODE: build_solana_rpc,
            ServiceType.RPC: build_solana_rpc,
        },
    ),
}


class ProviderRegistry:
    """
    Resolves chain identifiers to providers.

    One provider per chain for the registry's lifetime. Construction is serialized
    so concurrent first lookups build exactly one instance.
    """

    def __init__(self, config: ConfigSource, transport: Optional[RequestFn] = None, convert_units: bool = True):
        self.config = config
        self.convert_units = convert_units
        self._owns_transport = transport is None
        self.transport: RequestFn = transport if transport is not None else AiohttpTransport()
        self._providers: Dict[str, ChainProvider] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(chain: Union[ChainIdentifier, str]) -> str:
        if isinstance(chain, ChainIdentifier):
            return chain.value
        return str(chain).strip().lower()

    def register(self, chain: Union[ChainIdentifier, str], provider: ChainProvider) -> None:
        """Register a provider by hand, replacing any cached one for the same key."""
        with self._lock:
            self._providers[self._key(chain)] = provider
        logger.info(f"Registered {type(provider).__name__} for {self._key(chain)}")

    def resolve(self, chain: Union[ChainIdentifier, str]) -> ChainProvider:
        key = self._key(chain)
        provider = self._providers.get(key)
        if provider is not None:
            return provider

        identifier = to_chain_identifier(key)
        if identifier not in PROVIDER_ROUTES:
            raise UnsupportedChainError(f"No provider route for chain: {key}", chain=key)

        with self._lock:
            provider = self._providers.get(key)
            if provider is None:
                provider = self._build(identifier)
                self._providers[key] = provider
        return provider

    def _build(self, identifier: ChainIdentifier) -> ChainProvider:
        chain = get_chain_by_identifier(identifier)
        adapter_cls, builders = FAMILY_IMPLEMENTATIONS[chain.family]

        candidates = [
            (DATA_SOURCES[service](chain, self.config), builders[service])
            for service in PROVIDER_ROUTES[identifier]
        ]
        (source, builder), fallbacks = candidates[0], candidates[1:]
        provider = RpcChainProvider(
            chain,
            source,
            adapter_cls(convert_units=self.convert_units),
            builder,
            self.transport,
            fallbacks=fallbacks,
        )

        if provider.is_supported():
            routed = ", ".join(f"{tier.value}={provider.get_source(tier).name}" for tier in NetworkTier)
            logger.info(f"Resolved {identifier.value} to {routed}")
        else:
            # Still cached so callers get a degraded response instead of an error
            logger.warning(f"No configured data source for {identifier.value}")
        return provider

    def registered_chains(self) -> List[str]:
        return list(self._providers)

    def is_chain_supported(self, chain: Union[ChainIdentifier, str]) -> bool:
        try:
            return self.resolve(chain).is_supported()
        except UnsupportedChainError:
            return False

    async def close(self) -> None:
        for provider in list(self._providers.values()):
            await provider.close()
        if self._owns_transport and isinstance(self.transport, AiohttpTransport):
            await self.transport.close()
