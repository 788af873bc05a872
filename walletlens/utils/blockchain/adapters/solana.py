from typing import Any, Dict

from walletlens.models.schemas.balances import (
    BalancesResponse,
    NativeBalance,
    NftBalance,
    NftCollection,
    NftMetadata,
    TokenBalance,
    UNKNOWN_COLLECTION_NAME,
    UNKNOWN_NFT_NAME,
)
from walletlens.utils.blockchain.types import RawBalances, SolanaRpcRawBalances
from walletlens.utils.chains.types import ChainConfig
from walletlens.utils.units import SOLANA_NATIVE_DECIMALS
from .base import BalanceAdapter


class SolanaBalanceAdapter(BalanceAdapter):
    default_decimals = SOLANA_NATIVE_DECIMALS

    def to_balances_response(self, raw: RawBalances, chain_config: ChainConfig) -> BalancesResponse:
        if not isinstance(raw, SolanaRpcRawBalances):
            raise TypeError(f"SolanaBalanceAdapter cannot map {type(raw).__name__}")

        tokens = []
        for account in raw.token_accounts:
            metadata = account.metadata or {}
            decimals = self.decimals_or_default(account.decimals)
            tokens.append(TokenBalance(
                mint=account.mint,
                balance=self.amount(account.amount, decimals),
                token_metadata=self.token_metadata(metadata.get("symbol"), decimals, metadata.get("name")),
            ))

        return BalancesResponse(
            native_balance=NativeBalance(balance=self.amount(raw.sol_balance, chain_config.native_decimals)),
            tokens=tokens,
            nfts=[self._nft(nft) for nft in raw.nfts],
        )

    def _nft(self, nft: Dict[str, Any]) -> NftBalance:
        # Solana has no ERC-style token ids; the metadata uri stands in for the image
        return NftBalance(
            mint=nft.get("mint") or "",
            token_id="",
            token_metadata=NftMetadata(
                collection=NftCollection(name=nft.get("collectionName") or UNKNOWN_COLLECTION_NAME),
                name=nft.get("name") or UNKNOWN_NFT_NAME,
                image=nft.get("image") or nft.get("uri") or "",
            ),
        )
