from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from walletlens.utils.blockchain.errors import ConfigurationError
from walletlens.utils.chains.types import Chain
from walletlens.utils.types import ConfigSource, NetworkTier, ServiceType


class DataSource(ABC):
    """
    One upstream data provider for one chain.

    Knows which configuration keys hold its credential for a tier, in fallback
    order, and how to turn that credential into an endpoint URL.
    """

    service: ServiceType

    def __init__(self, chain: Chain, config: ConfigSource):
        self.chain = chain
        self.config = config

    @property
    def name(self) -> str:
        return self.service.value.lower()

    @abstractmethod
    def credential_keys(self, tier: NetworkTier) -> List[str]:
        """Configuration keys to try, most specific first."""

    def serves(self, tier: NetworkTier) -> bool:
        return True

    def default_credential(self, tier: NetworkTier) -> Optional[str]:
        return None

    def resolve_credential(self, tier: NetworkTier) -> Optional[str]:
        for key in self.credential_keys(tier):
            value = self.config.get(key)
            if value and value.strip():
                return value.strip()
        return self.default_credential(tier)

    @abstractmethod
    def base_url(self, tier: NetworkTier, credential: str) -> str:
        pass


class AlchemySource(DataSource):
    service = ServiceType.ALCHEMY

    def credential_keys(self, tier: NetworkTier) -> List[str]:
        prefix = self.chain.env_prefix
        return [
            f"ALCHEMY_API_KEY_{prefix}_{tier.value.upper()}",
            f"ALCHEMY_API_KEY_{prefix}",
            "ALCHEMY_API_KEY",
        ]

    def serves(self, tier: NetworkTier) -> bool:
        return bool(self.chain.get_alias(ServiceType.ALCHEMY, tier))

    def network(self, tier: NetworkTier) -> str:
        """Alchemy network slug, e.g. eth-mainnet."""
        network = self.chain.get_alias(ServiceType.ALCHEMY, tier)
        if not network:
            raise ConfigurationError(
                f"Alchemy has no {tier.value} network for {self.chain.id.value}", chain=self.chain.id.value
            )
        return network

    def base_url(self, tier: NetworkTier, credential: str) -> str:
        return f"https://{self.network(tier)}.g.alchemy.com/v2/{credential}"


class QuickNodeSource(DataSource):
    service = ServiceType.QUICKNODE

    def credential_keys(self, tier: NetworkTier) -> List[str]:
        prefix = self.chain.env_prefix
        return [
            f"QUICKNODE_{prefix}_{tier.value.upper()}_URL",
            f"QUICKNODE_{prefix}_URL",
        ]

    def base_url(self, tier: NetworkTier, credential: str) -> str:
        # QuickNode endpoints embed the token in the URL
        return credential


class RpcSource(DataSource):
    service = ServiceType.RPC

    def credential_keys(self, tier: NetworkTier) -> List[str]:
        prefix = self.chain.env_prefix
        return [
            f"RPC_ENDPOINT_{prefix}_{tier.value.upper()}",
            f"RPC_ENDPOINT_{prefix}",
        ]

    def default_credential(self, tier: NetworkTier) -> Optional[str]:
        return self.chain.default_endpoints.get(tier)

    def base_url(self, tier: NetworkTier, credential: str) -> str:
        return credential


DATA_SOURCES: Dict[ServiceType, Type[DataSource]] = {
    ServiceType.ALCHEMY: AlchemySource,
    ServiceType.QUICKNODE: QuickNodeSource,
    ServiceType.RPC: RpcSource,
}
