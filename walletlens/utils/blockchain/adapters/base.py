from abc import ABC, abstractmethod
from typing import Any, Optional

from walletlens.models.schemas.balances import BalancesResponse, UNKNOWN_SYMBOL, UNKNOWN_TOKEN_NAME, TokenMetadata
from walletlens.utils.blockchain.types import RawBalances, RawFee
from walletlens.utils.chains.types import ChainConfig
from walletlens.utils.logging import get_logger
from walletlens.utils.units import normalize, parse_raw_amount

logger = get_logger(__name__)


class BalanceAdapter(ABC):
    """
    Maps the raw payloads of one chain family onto BalancesResponse.

    With `convert_units` off, balances are passed through as smallest-unit integer strings.
    """

    default_decimals: int = 18

    def __init__(self, convert_units: bool = True):
        self.convert_units = convert_units

    @abstractmethod
    def to_balances_response(self, raw: RawBalances, chain_config: ChainConfig) -> BalancesResponse:
        pass

    def to_gas_price(self, raw: RawFee) -> str:
        """EIP-1559 max fee wins over the legacy gas price; "0" when neither is known."""
        for value in (raw.max_fee_per_gas, raw.gas_price):
            if value not in (None, ""):
                return str(parse_raw_amount(value))
        return "0"

    def to_estimate_gas(self, raw: Any) -> str:
        return str(raw)

    def amount(self, value: Any, decimals: int) -> str:
        """Render one balance; an unparseable upstream value becomes "0"."""
        try:
            if self.convert_units:
                return normalize(value, decimals)
            return str(parse_raw_amount(value))
        except ValueError as e:
            logger.warning(f"Unparseable balance {value!r}: {str(e)}")
            return "0"

    def decimals_or_default(self, decimals: Any) -> int:
        if isinstance(decimals, bool):
            return self.default_decimals
        try:
            value = int(decimals)
        except (TypeError, ValueError):
            return self.default_decimals
        return value if value >= 0 else self.default_decimals

    def token_metadata(self, symbol: Optional[str], decimals: int, name: Optional[str]) -> TokenMetadata:
        return TokenMetadata(
            symbol=symbol or UNKNOWN_SYMBOL,
            decimals=decimals,
            name=name or UNKNOWN_TOKEN_NAME,
        )
