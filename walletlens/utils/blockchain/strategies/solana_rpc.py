import asyncio
import base64
from typing import Any, Dict, List, Optional

from aiocache import Cache

from walletlens.config import (
    SOLANA_LAMPORTS_PER_SIGNATURE,
    SOLANA_NFT_ACCOUNT_SIZE,
    SOLANA_NFT_OWNER_OFFSET,
    TOKEN_METADATA_CACHE_TTL,
)
from walletlens.utils.blockchain.errors import TransportError
from walletlens.utils.blockchain.metaplex import (
    METADATA_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    get_metadata_account,
    unpack_metadata_account,
)
from walletlens.utils.blockchain.transport import rpc_call
from walletlens.utils.blockchain.types import RawFee, RawTokenAccount, SolanaNftLayout, SolanaRpcRawBalances
from walletlens.utils.chains.types import Chain
from walletlens.utils.logging import get_logger
from walletlens.utils.types import NetworkTier, RequestFn
from .base import BalanceStrategy

logger = get_logger(__name__)

DEFAULT_NFT_LAYOUT = SolanaNftLayout(data_size=SOLANA_NFT_ACCOUNT_SIZE, owner_offset=SOLANA_NFT_OWNER_OFFSET)
TOKEN_PROGRAMS = (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID)


class SolanaRpcStrategy(BalanceStrategy):
    """
    Solana balances over JSON-RPC.

    Token metadata comes from each mint's Metaplex metadata PDA. NFTs are found with
    getProgramAccounts on the metadata program, filtered by the configured account layout.
    """

    def __init__(
        self,
        chain: Chain,
        request: RequestFn,
        endpoint: str,
        nft_layout: SolanaNftLayout = DEFAULT_NFT_LAYOUT,
        lamports_per_signature: int = SOLANA_LAMPORTS_PER_SIGNATURE,
        cache: Optional[Cache] = None,
    ):
        super().__init__(chain)
        self.request = request
        self.endpoint = endpoint
        self.nft_layout = nft_layout
        self.lamports_per_signature = lamports_per_signature
        self.cache = cache or Cache(Cache.MEMORY, namespace=f"solana-metadata:{endpoint}")

    async def _call(self, method: str, params: List[Any]) -> Any:
        return await rpc_call(self.request, self.endpoint, method, params)

    async def _get_sol_balance(self, address: str) -> str:
        result = await self._call("getBalance", [address])
        return str(result["value"])

    async def _get_token_accounts(self, address: str) -> List[Dict[str, Any]]:
        results = await asyncio.gather(
            *(
                self._call("getTokenAccountsByOwner", [address, {"programId": program}, {"encoding": "jsonParsed"}])
                for program in TOKEN_PROGRAMS
            ),
            return_exceptions=True,
        )
        errors = [result for result in results if isinstance(result, BaseException)]
        if len(errors) == len(results):
            raise errors[0]

        accounts = []
        for program, result in zip(TOKEN_PROGRAMS, results):
            if isinstance(result, BaseException):
                logger.warning(f"Token accounts for {program} unavailable: {str(result)}")
                continue
            for account in result.get("value", []):
                try:
                    info = account["account"]["data"]["parsed"]["info"]
                    accounts.append({
                        "mint": info["mint"],
                        "amount": info["tokenAmount"]["amount"],
                        "decimals": info["tokenAmount"].get("decimals"),
                    })
                except (KeyError, TypeError) as e:
                    logger.warning(f"Failed to parse token account data: {str(e)}")
                    continue
        return accounts

    async def _get_nfts(self, address: str) -> List[Dict[str, Any]]:
        filters = [
            {"dataSize": self.nft_layout.data_size},
            {
                "memcmp": {
                    "offset": self.nft_layout.owner_offset,
                    "bytes": address,
                }
            },
        ]
        result = await self._call("getProgramAccounts", [
            METADATA_PROGRAM_ID,
            {"encoding": "base64", "filters": filters},
        ])

        nfts = []
        for account in result or []:
            try:
                metadata = unpack_metadata_account(base64.b64decode(account["account"]["data"][0]))
            except (KeyError, TypeError, IndexError, ValueError) as e:
                logger.warning(f"Skipping undecodable metadata account {account.get('pubkey')}: {str(e)}")
                continue
            nfts.append({
                "mint": metadata["mint"],
                "name": metadata["data"]["name"],
                "symbol": metadata["data"]["symbol"],
                "uri": metadata["data"]["uri"],
            })
        return nfts

    async def get_token_metadata(self, mint: str) -> Optional[Dict[str, Any]]:
        """Name, symbol and uri from the mint's metadata account. None when the mint has none."""
        cached = await self.cache.get(mint)
        if cached is not None:
            return cached

        metadata_address = get_metadata_account(mint)
        result = await self._call("getAccountInfo", [str(metadata_address), {"encoding": "base64"}])
        value = (result or {}).get("value")
        if not value:
            logger.debug(f"No metadata account for mint {mint}")
            return None

        metadata = unpack_metadata_account(base64.b64decode(value["data"][0]))
        token_metadata = {
            "name": metadata["data"]["name"],
            "symbol": metadata["data"]["symbol"],
            "uri": metadata["data"]["uri"],
        }
        await self.cache.set(mint, token_metadata, ttl=TOKEN_METADATA_CACHE_TTL)
        return token_metadata

    async def get_raw_balances(self, address: str, tier: NetworkTier) -> SolanaRpcRawBalances:
        values, failed = await self.fetch_slots(tier, {
            "native": self._get_sol_balance(address),
            "tokens": self._get_token_accounts(address),
            "nfts": self._get_nfts(address),
        })

        accounts = values["tokens"] or []
        metadata, metadata_failed = await self.fetch_each(
            tier, "token_metadata", [self.get_token_metadata(account["mint"]) for account in accounts]
        )
        if metadata_failed:
            failed += ("token_metadata",)

        return SolanaRpcRawBalances(
            sol_balance=values["native"],
            token_accounts=[
                RawTokenAccount(
                    mint=account["mint"],
                    amount=account["amount"],
                    decimals=account["decimals"],
                    metadata=meta,
                )
                for account, meta in zip(accounts, metadata)
            ],
            nfts=values["nfts"] or [],
            failed=failed,
        )

    async def get_raw_gas_price(self, tier: NetworkTier) -> RawFee:
        fees = await self._call("getRecentPrioritizationFees", [])
        priority = max((int(fee.get("prioritizationFee", 0)) for fee in fees or []), default=0)
        return RawFee(
            gas_price=str(self.lamports_per_signature),
            max_priority_fee_per_gas=str(priority),
        )

    async def get_raw_estimate_gas(self, tx: Dict[str, Any], tier: NetworkTier) -> str:
        """Compute units consumed by simulating the base64 encoded transaction in `data`."""
        if not tx.get("data"):
            raise ValueError("Solana estimation needs a base64 encoded transaction in 'data'")
        result = await self._call("simulateTransaction", [
            tx["data"],
            {"encoding": "base64", "sigVerify": False, "replaceRecentBlockhash": True},
        ])
        value = (result or {}).get("value") or {}
        if value.get("err") is not None:
            raise TransportError(f"Transaction simulation failed: {value['err']}", chain=self.chain.id.value)
        return str(value.get("unitsConsumed") or 0)
