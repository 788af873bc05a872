from typing import Any, Dict, List

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
from walletlens.utils.blockchain.types import EvmRpcRawBalances, EvmSdkRawBalances, RawBalances
from walletlens.utils.chains.types import ChainConfig
from walletlens.utils.units import EVM_DEFAULT_DECIMALS
from .base import BalanceAdapter


def _nft_image(image: Any) -> str:
    # Alchemy v3 returns an object with several cached renditions
    if isinstance(image, dict):
        return image.get("cachedUrl") or image.get("originalUrl") or image.get("thumbnailUrl") or ""
    return image or ""


class EvmBalanceAdapter(BalanceAdapter):
    default_decimals = EVM_DEFAULT_DECIMALS

    def to_balances_response(self, raw: RawBalances, chain_config: ChainConfig) -> BalancesResponse:
        if isinstance(raw, EvmSdkRawBalances):
            return BalancesResponse(
                native_balance=NativeBalance(balance=self.amount(raw.native_balance, chain_config.native_decimals)),
                tokens=self._sdk_tokens(raw),
                nfts=[self._sdk_nft(nft) for nft in raw.owned_nfts],
            )
        if isinstance(raw, EvmRpcRawBalances):
            return BalancesResponse(
                native_balance=NativeBalance(balance=self.amount(raw.native_balance, chain_config.native_decimals)),
                tokens=self._rpc_tokens(raw),
                nfts=[self._rpc_nft(nft) for nft in raw.nfts],
            )
        raise TypeError(f"EvmBalanceAdapter cannot map {type(raw).__name__}")

    def _sdk_tokens(self, raw: EvmSdkRawBalances) -> List[TokenBalance]:
        tokens = []
        for token in raw.token_balances:
            metadata = token.metadata or {}
            decimals = self.decimals_or_default(metadata.get("decimals"))
            tokens.append(TokenBalance(
                mint=token.contract_address,
                balance=self.amount(token.token_balance, decimals),
                token_metadata=self.token_metadata(metadata.get("symbol"), decimals, metadata.get("name")),
            ))
        return tokens

    def _rpc_tokens(self, raw: EvmRpcRawBalances) -> List[TokenBalance]:
        tokens = []
        for token in raw.tokens:
            decimals = self.decimals_or_default(token.get("decimals"))
            tokens.append(TokenBalance(
                mint=token["contractAddress"],
                balance=self.amount(token.get("balance"), decimals),
                token_metadata=self.token_metadata(token.get("symbol"), decimals, token.get("name")),
            ))
        return tokens

    def _sdk_nft(self, nft: Dict[str, Any]) -> NftBalance:
        contract = nft.get("contract") or {}
        collection = nft.get("collection") or {}
        opensea = contract.get("openSeaMetadata") or {}
        return NftBalance(
            mint=contract.get("address", ""),
            token_id=str(nft.get("tokenId") or ""),
            token_metadata=NftMetadata(
                collection=NftCollection(
                    name=collection.get("name") or opensea.get("collectionName") or contract.get("name")
                    or UNKNOWN_COLLECTION_NAME
                ),
                name=nft.get("name") or UNKNOWN_NFT_NAME,
                image=_nft_image(nft.get("image")),
            ),
        )

    def _rpc_nft(self, nft: Dict[str, Any]) -> NftBalance:
        return NftBalance(
            mint=nft.get("contractAddress") or "",
            token_id=str(nft.get("tokenId") or ""),
            token_metadata=NftMetadata(
                collection=NftCollection(name=nft.get("collectionName") or UNKNOWN_COLLECTION_NAME),
                name=nft.get("name") or UNKNOWN_NFT_NAME,
                image=_nft_image(nft.get("image")),
            ),
        )
