import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from eth_utils import to_checksum_address
from web3 import AsyncWeb3, Web3

from walletlens.config import REQUEST_TIMEOUT_SECONDS
from walletlens.utils.logging import get_logger
from walletlens.utils.units import parse_raw_amount
from .errors import TransportError
from .transport import HEADERS
from .types import RawFee

logger = get_logger(__name__)

# Upper bound on getNFTsForOwner pages followed for one wallet
MAX_NFT_PAGES = 5


class AlchemyClient:
    """
    SDK-style client for one Alchemy network.

    JSON-RPC goes through web3's AsyncHTTPProvider; the NFT API is a REST endpoint
    and goes through aiohttp.
    """

    def __init__(self, network: str, api_key: str, timeout: float = REQUEST_TIMEOUT_SECONDS):
        if not api_key:
            raise ValueError("Alchemy API key is required")
        self.network = network
        self.rpc_url = f"https://{network}.g.alchemy.com/v2/{api_key}"
        self.nft_url = f"https://{network}.g.alchemy.com/nft/v3/{api_key}"
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self.w3 = AsyncWeb3(Web3.AsyncHTTPProvider(self.rpc_url, request_kwargs={"timeout": self._timeout}))
        self.session: Optional[aiohttp.ClientSession] = None

    async def _make_request(self, method: str, params: List[Any]) -> Any:
        response = await self.w3.provider.make_request(method, params)
        if response.get("error"):
            error = response["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise TransportError(f"{method} returned an error: {message}")
        return response.get("result")

    async def get_balance(self, address: str) -> str:
        balance = await self.w3.eth.get_balance(to_checksum_address(address))
        return str(balance)

    async def get_token_balances(self, address: str) -> List[Dict[str, Any]]:
        """Returns [{contractAddress, tokenBalance}] for every ERC-20 the wallet has touched."""
        result = await self._make_request("alchemy_getTokenBalances", [address, "erc20"])
        return (result or {}).get("tokenBalances", [])

    async def get_token_metadata(self, contract_address: str) -> Dict[str, Any]:
        """Returns {name, symbol, decimals, logo}; any field may be None."""
        return await self._make_request("alchemy_getTokenMetadata", [contract_address]) or {}

    async def get_nfts_for_owner(self, address: str) -> List[Dict[str, Any]]:
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self._timeout, headers=HEADERS)

        owned: List[Dict[str, Any]] = []
        params = {"owner": address, "withMetadata": "true"}
        for _ in range(MAX_NFT_PAGES):
            try:
                async with self.session.get(f"{self.nft_url}/getNFTsForOwner", params=params) as response:
                    if response.status >= 400:
                        raise TransportError(f"HTTP {response.status} from Alchemy NFT API")
                    data = await response.json(content_type=None)
            except (aiohttp.ClientError, ValueError) as e:
                raise TransportError(f"Alchemy NFT API request failed: {str(e)}")
            except asyncio.TimeoutError:
                raise TransportError("Alchemy NFT API request timed out")

            owned.extend(data.get("ownedNfts", []))
            page_key = data.get("pageKey")
            if not page_key:
                break
            params["pageKey"] = page_key
        else:
            logger.warning(f"Stopped paging NFTs for {address} on {self.network} after {MAX_NFT_PAGES} pages")
        return owned

    async def get_fee_data(self) -> RawFee:
        gas_price = await self.w3.eth.gas_price
        try:
            priority = await self.w3.eth.max_priority_fee
        except Exception as e:
            # pre-London networks have no priority fee
            logger.debug(f"max_priority_fee unavailable on {self.network}: {str(e)}")
            return RawFee(gas_price=str(gas_price))

        block = await self.w3.eth.get_block("latest")
        base_fee = block.get("baseFeePerGas")
        max_fee = None
        if base_fee is not None:
            max_fee = str(2 * base_fee + priority)
        return RawFee(
            gas_price=str(gas_price),
            max_fee_per_gas=max_fee,
            max_priority_fee_per_gas=str(priority),
        )

    async def estimate_gas(self, tx: Dict[str, Any]) -> str:
        params: Dict[str, Any] = {"from": to_checksum_address(tx["from"])}
        if tx.get("to"):
            params["to"] = to_checksum_address(tx["to"])
        if tx.get("data"):
            params["data"] = tx["data"]
        if tx.get("value") is not None:
            params["value"] = parse_raw_amount(tx["value"])
        gas = await self.w3.eth.estimate_gas(params)
        return str(gas)

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None
        await self.w3.provider.disconnect()
