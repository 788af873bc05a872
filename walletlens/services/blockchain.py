from typing import Any, Dict, List, Optional, Union

from walletlens.models.schemas.balances import BalancesResponse, ChainSummary, TransactionRequest
from walletlens.services.provider import RpcChainProvider
from walletlens.services.registry import PROVIDER_ROUTES, ProviderRegistry
from walletlens.utils.blockchain.errors import UnsupportedChainError
from walletlens.utils.chains.queries import get_all_chains
from walletlens.utils.chains.types import ChainConfig
from walletlens.utils.logging import get_logger
from walletlens.utils.types import ChainIdentifier, NetworkTier

logger = get_logger(__name__)

ChainKey = Union[ChainIdentifier, str]


class BlockchainService:
    """Entry point for balance, fee and raw RPC queries across chains."""

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    async def get_balances(
        self, chain: ChainKey, address: str, tier: NetworkTier = NetworkTier.MAINNET
    ) -> BalancesResponse:
        """
        Get native, token and NFT balances for a wallet.

        Args:
            chain: Chain identifier, e.g. "ethereum"
            address: Wallet address, passed to the upstream as is
            tier: Mainnet or testnet

        Raises:
            UnsupportedChainError: If no provider is mapped to the chain
        """
        provider = self.registry.resolve(chain)
        logger.debug(f"Fetching balances for {address} on {chain} ({getattr(tier, 'value', tier)}) via {provider.provider_name}")
        return await provider.get_balances(address, tier)

    def _rpc_provider(self, chain: ChainKey) -> RpcChainProvider:
        provider = self.registry.resolve(chain)
        if not isinstance(provider, RpcChainProvider):
            raise UnsupportedChainError(f"Chain {chain} does not expose raw RPC calls", chain=str(chain))
        return provider

    async def call_rpc_method(
        self,
        chain: ChainKey,
        method: str,
        params: Optional[List[Any]] = None,
        tier: NetworkTier = NetworkTier.MAINNET,
    ) -> Any:
        return await self._rpc_provider(chain).call_rpc_method(method, params or [], tier)

    async def check_health(self, chain: ChainKey, tier: NetworkTier = NetworkTier.MAINNET) -> bool:
        return await self._rpc_provider(chain).check_health(tier)

    async def get_gas_price(self, chain: ChainKey, tier: NetworkTier = NetworkTier.MAINNET) -> str:
        return await self.registry.resolve(chain).get_gas_price(tier)

    async def estimate_gas(
        self,
        chain: ChainKey,
        tx: Union[TransactionRequest, Dict[str, Any]],
        tier: NetworkTier = NetworkTier.MAINNET,
    ) -> str:
        return await self.registry.resolve(chain).estimate_gas(tx, tier)

    def get_chain_config(self, chain: ChainKey) -> ChainConfig:
        return self.registry.resolve(chain).get_chain_config()

    def list_chains(self) -> List[ChainSummary]:
        summaries = []
        for chain in get_all_chains():
            if chain.id not in PROVIDER_ROUTES:
                continue
            config = chain.config
            summaries.append(ChainSummary(
                id=chain.id.value,
                family=chain.family.value,
                chain_id=config.chain_id,
                name=config.name,
                native_symbol=config.native_symbol,
                native_decimals=config.native_decimals,
                testnet_chain_id=config.testnet_chain_id,
                testnet_name=config.testnet_name,
                supported=self.registry.is_chain_supported(chain.id),
            ))
        return summaries
