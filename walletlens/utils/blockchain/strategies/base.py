import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple

from walletlens.utils.blockchain.errors import PartialDataError
from walletlens.utils.blockchain.types import RawBalances, RawFee
from walletlens.utils.chains.types import Chain
from walletlens.utils.logging import record_failure
from walletlens.utils.types import NetworkTier


class BalanceStrategy(ABC):
    """
    Fetches unnormalized, source-shaped data for one chain over one transport.

    Strategies never convert units or substitute defaults; that is the adapter's job.
    """

    def __init__(self, chain: Chain):
        self.chain = chain

    @abstractmethod
    async def get_raw_balances(self, address: str, tier: NetworkTier) -> RawBalances:
        """Native balance, token list and NFT list as the upstream returned them."""

    @abstractmethod
    async def get_raw_gas_price(self, tier: NetworkTier) -> RawFee:
        """Fee data as integer strings."""

    @abstractmethod
    async def get_raw_estimate_gas(self, tx: Dict[str, Any], tier: NetworkTier) -> str:
        """Upstream gas (or compute unit) estimate as an integer string."""

    async def close(self) -> None:
        """Release transport resources owned by the strategy."""

    async def fetch_slots(
        self, tier: NetworkTier, slots: Dict[str, Awaitable[Any]]
    ) -> Tuple[Dict[str, Any], Tuple[str, ...]]:
        """
        Run independent sub-fetches concurrently.

        A failing slot is logged and comes back as None; its name is listed in the
        returned `failed` tuple. Results are keyed by slot name, not completion order.
        """
        names = list(slots)
        results = await asyncio.gather(*slots.values(), return_exceptions=True)

        values: Dict[str, Any] = {}
        failed: List[str] = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                error = PartialDataError(str(result) or type(result).__name__, slot=name, chain=self.chain.id.value)
                record_failure(self.chain.id, tier, f"get_balances.{name}", error, level="WARNING")
                failed.append(name)
                values[name] = None
            else:
                values[name] = result
        return values, tuple(failed)

    async def fetch_each(
        self, tier: NetworkTier, slot: str, calls: Sequence[Awaitable[Any]]
    ) -> Tuple[List[Optional[Any]], bool]:
        """
        Run a batch of per-item lookups (e.g. token metadata) concurrently.

        Returns one result per call in call order, None where the call failed, plus
        whether any call failed.
        """
        results = await asyncio.gather(*calls, return_exceptions=True)
        values: List[Optional[Any]] = []
        any_failed = False
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                any_failed = True
                record_failure(self.chain.id, tier, f"get_balances.{slot}", result, level="WARNING")
                values.append(None)
            else:
                values.append(result)
        return values, any_failed
