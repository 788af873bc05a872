from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union


class RawTokenBalance(NamedTuple):
    contract_address: str
    # integer string as returned upstream, hex or decimal
    token_balance: Optional[str]
    # {symbol, decimals, name, logo} or None when the lookup failed
    metadata: Optional[Dict[str, Any]] = None


class EvmSdkRawBalances(NamedTuple):
    """Alchemy SDK shaped payload."""
    native_balance: Optional[str]
    token_balances: List[RawTokenBalance]
    owned_nfts: List[Dict[str, Any]]
    failed: Tuple[str, ...] = ()


class EvmRpcRawBalances(NamedTuple):
    """Payload built from plain JSON-RPC calls (QuickNode add-ons or public nodes)."""
    native_balance: Optional[str]
    tokens: List[Dict[str, Any]]
    nfts: List[Dict[str, Any]]
    failed: Tuple[str, ...] = ()


class RawTokenAccount(NamedTuple):
    mint: str
    amount: Optional[str]
    decimals: Optional[int]
    # {name, symbol, uri} from the Metaplex metadata account, None when absent
    metadata: Optional[Dict[str, Any]] = None


class SolanaRpcRawBalances(NamedTuple):
    sol_balance: Optional[str]
    token_accounts: List[RawTokenAccount]
    nfts: List[Dict[str, Any]]
    failed: Tuple[str, ...] = ()


RawBalances = Union[EvmSdkRawBalances, EvmRpcRawBalances, SolanaRpcRawBalances]


class RawFee(NamedTuple):
    gas_price: Optional[str] = None
    max_fee_per_gas: Optional[str] = None
    max_priority_fee_per_gas: Optional[str] = None


class SolanaNftLayout(NamedTuple):
    """Expected Metaplex metadata account size and owner field offset."""
    data_size: int
    owner_offset: int
