from typing import Any, Dict

from walletlens.utils.blockchain.alchemy import AlchemyClient
from walletlens.utils.blockchain.types import EvmSdkRawBalances, RawFee, RawTokenBalance
from walletlens.utils.chains.types import Chain
from walletlens.utils.logging import get_logger
from walletlens.utils.types import NetworkTier
from .base import BalanceStrategy

logger = get_logger(__name__)


class EvmAlchemyStrategy(BalanceStrategy):
    """EVM balances through an Alchemy SDK client bound to one network."""

    def __init__(self, chain: Chain, client: AlchemyClient):
        super().__init__(chain)
        self.client = client

    async def get_raw_balances(self, address: str, tier: NetworkTier) -> EvmSdkRawBalances:
        values, failed = await self.fetch_slots(tier, {
            "native": self.client.get_balance(address),
            "tokens": self.client.get_token_balances(address),
            "nfts": self.client.get_nfts_for_owner(address),
        })

        token_balances = []
        for token in values["tokens"] or []:
            if not isinstance(token, dict) or not token.get("contractAddress"):
                logger.warning(f"Skipping token balance without contractAddress on {self.chain.id.value}: {token!r}")
                continue
            token_balances.append(token)

        metadata, metadata_failed = await self.fetch_each(
            tier,
            "token_metadata",
            [self.client.get_token_metadata(token["contractAddress"]) for token in token_balances],
        )
        if metadata_failed:
            failed += ("token_metadata",)

        tokens = [
            RawTokenBalance(
                contract_address=token["contractAddress"],
                token_balance=token.get("tokenBalance"),
                metadata=meta,
            )
            for token, meta in zip(token_balances, metadata)
        ]
        logger.debug(f"Fetched {len(tokens)} tokens for {address} on {self.chain.id.value} ({tier.value})")

        return EvmSdkRawBalances(
            native_balance=values["native"],
            token_balances=tokens,
            owned_nfts=values["nfts"] or [],
            failed=failed,
        )

    async def get_raw_gas_price(self, tier: NetworkTier) -> RawFee:
        return await self.client.get_fee_data()

    async def get_raw_estimate_gas(self, tx: Dict[str, Any], tier: NetworkTier) -> str:
        return await self.client.estimate_gas(tx)

    async def close(self) -> None:
        await self.client.close()
