from typing import Any, Dict, List

from walletlens.utils.blockchain.errors import TransportError
from walletlens.utils.blockchain.transport import rpc_call
from walletlens.utils.blockchain.types import EvmRpcRawBalances, RawFee
from walletlens.utils.chains.types import Chain
from walletlens.utils.logging import get_logger
from walletlens.utils.types import NetworkTier, RequestFn
from walletlens.utils.units import parse_raw_amount
from .base import BalanceStrategy

logger = get_logger(__name__)

NFT_PAGE_SIZE = 40


class EvmRpcStrategy(BalanceStrategy):
    """
    EVM balances over plain JSON-RPC.

    With `addons` enabled the endpoint is expected to serve QuickNode's token and NFT
    methods (qn_getWalletTokenBalance, qn_fetchNFTs). A bare public node only answers
    the native balance, so token and NFT lists stay empty.
    """

    def __init__(self, chain: Chain, request: RequestFn, endpoint: str, addons: bool = True):
        super().__init__(chain)
        self.request = request
        self.endpoint = endpoint
        self.addons = addons

    async def _call(self, method: str, params: List[Any]) -> Any:
        return await rpc_call(self.request, self.endpoint, method, params)

    async def _get_native_balance(self, address: str) -> str:
        result = await self._call("eth_getBalance", [address, "latest"])
        return str(parse_raw_amount(result))

    async def _get_tokens(self, address: str) -> List[Dict[str, Any]]:
        if not self.addons:
            return []
        result = await self._call("qn_getWalletTokenBalance", [{"wallet": address}])
        return [
            {
                "contractAddress": asset.get("address"),
                "symbol": asset.get("symbol"),
                "name": asset.get("name"),
                "decimals": asset.get("decimals"),
                "balance": asset.get("amount") or asset.get("totalBalance"),
            }
            for asset in (result or {}).get("assets", [])
            if asset.get("address")
        ]

    async def _get_nfts(self, address: str) -> List[Dict[str, Any]]:
        if not self.addons:
            return []
        result = await self._call("qn_fetchNFTs", [{"wallet": address, "page": 1, "perPage": NFT_PAGE_SIZE}])
        return [
            {
                "contractAddress": nft.get("collectionAddress"),
                "tokenId": nft.get("collectionTokenId") or nft.get("tokenId"),
                "name": nft.get("name"),
                "collectionName": nft.get("collectionName"),
                "image": nft.get("imageUrl"),
            }
            for nft in (result or {}).get("assets", [])
        ]

    async def get_raw_balances(self, address: str, tier: NetworkTier) -> EvmRpcRawBalances:
        values, failed = await self.fetch_slots(tier, {
            "native": self._get_native_balance(address),
            "tokens": self._get_tokens(address),
            "nfts": self._get_nfts(address),
        })
        return EvmRpcRawBalances(
            native_balance=values["native"],
            tokens=values["tokens"] or [],
            nfts=values["nfts"] or [],
            failed=failed,
        )

    async def get_raw_gas_price(self, tier: NetworkTier) -> RawFee:
        gas_price = parse_raw_amount(await self._call("eth_gasPrice", []))
        try:
            priority = parse_raw_amount(await self._call("eth_maxPriorityFeePerGas", []))
        except TransportError as e:
            # legacy-fee chains reject the method
            logger.debug(f"eth_maxPriorityFeePerGas unavailable on {self.chain.id.value}: {e.message}")
            return RawFee(gas_price=str(gas_price))
        return RawFee(
            gas_price=str(gas_price),
            max_fee_per_gas=str(gas_price + priority),
            max_priority_fee_per_gas=str(priority),
        )

    async def get_raw_estimate_gas(self, tx: Dict[str, Any], tier: NetworkTier) -> str:
        params: Dict[str, Any] = {"from": tx["from"]}
        if tx.get("to"):
            params["to"] = tx["to"]
        if tx.get("data"):
            params["data"] = tx["data"]
        if tx.get("value") is not None:
            params["value"] = hex(parse_raw_amount(tx["value"]))
        result = await self._call("eth_estimateGas", [params])
        return str(parse_raw_amount(result))
