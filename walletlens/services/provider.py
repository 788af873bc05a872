import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from walletlens.models.schemas.balances import BalancesResponse, TransactionRequest
from walletlens.services.sources import DataSource
from walletlens.utils.blockchain.adapters.base import BalanceAdapter
from walletlens.utils.blockchain.errors import ConfigurationError
from walletlens.utils.blockchain.strategies.base import BalanceStrategy
from walletlens.utils.blockchain.transport import rpc_call
from walletlens.utils.chains.types import Chain, ChainConfig
from walletlens.utils.logging import get_logger, record_failure
from walletlens.utils.types import NetworkTier, RequestFn

logger = get_logger(__name__)

# (chain, source, tier, credential, request) -> strategy bound to that tier
StrategyBuilder = Callable[[Chain, DataSource, NetworkTier, str, RequestFn], BalanceStrategy]

# (source, builder, credential) chosen for one tier
TierRoute = Tuple[DataSource, StrategyBuilder, str]


class ProviderState(str, Enum):
    UNCONFIGURED = "UNCONFIGURED"
    CONFIGURED = "CONFIGURED"
    READY = "READY"


class ChainProvider:
    """
    Balance provider for one chain.

    `source` is the preferred data source and `fallbacks` are tried after it, in order.
    Each tier is bound at construction to the first source that serves it and resolves
    a credential for it, so mainnet and testnet may end up on different sources. The
    strategy for a tier is built on first use and reused afterwards.
    """

    def __init__(
        self,
        chain: Chain,
        source: DataSource,
        adapter: BalanceAdapter,
        strategy_builder: StrategyBuilder,
        request: RequestFn,
        fallbacks: Sequence[Tuple[DataSource, StrategyBuilder]] = (),
    ):
        self.chain = chain
        self.source = source
        self.adapter = adapter
        self.strategy_builder = strategy_builder
        self.request = request

        candidates = [(source, strategy_builder)] + list(fallbacks)
        self._routes: Dict[NetworkTier, Optional[TierRoute]] = {
            tier: self._select_route(candidates, tier) for tier in NetworkTier
        }
        self._strategies: Dict[NetworkTier, BalanceStrategy] = {}
        self._lock = threading.Lock()

        logger.debug(
            f"Provider for {chain.id.value}: "
            + ", ".join(
                f"{tier.value}={route[0].name if route else 'missing'}" for tier, route in self._routes.items()
            )
        )

    @staticmethod
    def _select_route(
        candidates: List[Tuple[DataSource, StrategyBuilder]], tier: NetworkTier
    ) -> Optional[TierRoute]:
        for source, builder in candidates:
            if not source.serves(tier):
                continue
            credential = source.resolve_credential(tier)
            if credential:
                return source, builder, credential
        return None

    def get_source(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> DataSource:
        """Data source bound to the tier, or the preferred one when none is configured."""
        route = self._routes.get(NetworkTier(tier))
        return route[0] if route else self.source

    @property
    def provider_name(self) -> str:
        return self.get_source(NetworkTier.MAINNET).name

    @property
    def state(self) -> ProviderState:
        if self._strategies:
            return ProviderState.READY
        if self.is_supported():
            return ProviderState.CONFIGURED
        return ProviderState.UNCONFIGURED

    def get_chain_config(self) -> ChainConfig:
        return self.chain.config

    def _route(self, tier: NetworkTier) -> TierRoute:
        route = self._routes.get(tier)
        if route is None:
            raise ConfigurationError(
                f"No configured data source for {self.chain.id.value} {tier.value}",
                chain=self.chain.id.value,
            )
        return route

    def get_api_key(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> str:
        return self._route(NetworkTier(tier))[2]

    def get_base_url(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> str:
        tier = NetworkTier(tier)
        source, _, credential = self._route(tier)
        return source.base_url(tier, credential)

    def is_supported(self) -> bool:
        return any(self._routes.values())

    def get_strategy(self, tier: NetworkTier) -> BalanceStrategy:
        strategy = self._strategies.get(tier)
        if strategy is not None:
            return strategy
        with self._lock:
            strategy = self._strategies.get(tier)
            if strategy is None:
                source, builder, credential = self._route(tier)
                strategy = builder(self.chain, source, tier, credential, self.request)
                self._strategies[tier] = strategy
                logger.info(f"Built {type(strategy).__name__} for {self.chain.id.value} ({tier.value}) via {source.name}")
        return strategy

    async def get_balances(
        self, address: str, tier: Union[NetworkTier, str] = NetworkTier.MAINNET
    ) -> BalancesResponse:
        """Never raises for a supported chain: any failure degrades to the empty response."""
        try:
            tier = NetworkTier(tier)
            strategy = self.get_strategy(tier)
            raw = await strategy.get_raw_balances(address, tier)
            return self.adapter.to_balances_response(raw, self.get_chain_config())
        except Exception as e:
            record_failure(self.chain.id, tier, "get_balances", e)
            return BalancesResponse.empty()

    async def get_gas_price(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> str:
        tier = NetworkTier(tier)
        raw = await self.get_strategy(tier).get_raw_gas_price(tier)
        return self.adapter.to_gas_price(raw)

    async def estimate_gas(
        self,
        tx: Union[TransactionRequest, Dict[str, Any]],
        tier: Union[NetworkTier, str] = NetworkTier.MAINNET,
    ) -> str:
        tier = NetworkTier(tier)
        if isinstance(tx, TransactionRequest):
            tx = tx.model_dump(by_alias=True, exclude_none=True)
        raw = await self.get_strategy(tier).get_raw_estimate_gas(tx, tier)
        return self.adapter.to_estimate_gas(raw)

    async def close(self) -> None:
        for strategy in list(self._strategies.values()):
            await strategy.close()


class RpcChainProvider(ChainProvider):
    """ChainProvider that also exposes the raw JSON-RPC endpoint of its data source."""

    def get_rpc_endpoint(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> str:
        return self.get_base_url(tier)

    async def call_rpc_method(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        tier: Union[NetworkTier, str] = NetworkTier.MAINNET,
    ) -> Any:
        endpoint = self.get_rpc_endpoint(tier)
        return await rpc_call(self.request, endpoint, method, params or [])

    async def check_health(self, tier: Union[NetworkTier, str] = NetworkTier.MAINNET) -> bool:
        try:
            await self.call_rpc_method(self.chain.health_method, [], tier)
            return True
        except Exception as e:
            record_failure(self.chain.id, tier, "check_health", e, level="WARNING")
            return False
