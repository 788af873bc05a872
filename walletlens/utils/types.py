from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping


class ChainIdentifier(str, Enum):
    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    BSC = "bsc"
    BASE = "base"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"

    SOLANA = "solana"


class NetworkTier(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class ChainFamily(str, Enum):
    EVM = "EVM"
    SOL = "SOL"


class ServiceType(str, Enum):
    ALCHEMY = "ALCHEMY"
    QUICKNODE = "QUICKNODE"
    # bare JSON-RPC endpoint, public or self-hosted
    RPC = "RPC"


# Key/value lookup supplying API keys and endpoint URLs.
ConfigSource = Mapping[str, str]

# (endpoint, json body) -> decoded json response
RequestFn = Callable[[str, Dict[str, Any]], Awaitable[Any]]
