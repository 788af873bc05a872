from typing import Optional, Dict
from pydantic import BaseModel, ConfigDict

from walletlens.utils.types import ChainIdentifier, ChainFamily, NetworkTier, ServiceType


class AliasModel(BaseModel):
    aliases: Optional[Dict[ServiceType, Dict[NetworkTier, str]]] = None

    def get_alias(self, service: ServiceType, tier: NetworkTier = NetworkTier.MAINNET) -> Optional[str]:
        if self.aliases:
            return self.aliases.get(service, {}).get(tier)


class ChainConfig(BaseModel):
    """Descriptive metadata for one chain. Immutable."""

    model_config = ConfigDict(frozen=True)

    chain_id: int
    name: str
    native_symbol: str
    native_decimals: int
    testnet_chain_id: Optional[int] = None
    testnet_name: Optional[str] = None


class Chain(AliasModel):
    model_config = ConfigDict(frozen=True)

    id: ChainIdentifier
    family: ChainFamily
    # prefix used to build configuration key names, e.g. ALCHEMY_API_KEY_ETH
    env_prefix: str
    config: ChainConfig
    image: str
    # cheap read-only JSON-RPC call used for health checks
    health_method: str
    default_endpoints: Dict[NetworkTier, str] = {}
