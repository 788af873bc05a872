from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

UNKNOWN_SYMBOL = "UNKNOWN"
UNKNOWN_TOKEN_NAME = "Unknown Token"
UNKNOWN_NFT_NAME = "Unknown NFT"
UNKNOWN_COLLECTION_NAME = "Unknown Collection"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NativeBalance(CamelModel):
    balance: str = Field(default="0", examples=["1.5"])


class TokenMetadata(CamelModel):
    symbol: str = Field(default=UNKNOWN_SYMBOL, examples=["USDC"])
    decimals: int = Field(ge=0, examples=[6])
    name: str = Field(default=UNKNOWN_TOKEN_NAME, examples=["USD Coin"])


class TokenBalance(CamelModel):
    mint: str = Field(examples=["0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"])
    balance: str = Field(default="0", examples=["12.5"])
    token_metadata: Optional[TokenMetadata] = None


class NftCollection(CamelModel):
    name: str = UNKNOWN_COLLECTION_NAME


class NftMetadata(CamelModel):
    collection: Optional[NftCollection] = None
    name: str = UNKNOWN_NFT_NAME
    image: str = ""

    @field_validator("image", mode="before")
    @classmethod
    def default_image(cls, v: Optional[str]) -> str:
        """Keep the schema total: a missing image is an empty string."""
        return v or ""


class NftBalance(CamelModel):
    mint: str
    token_id: Optional[str] = Field(default="", examples=["42"])
    token_metadata: Optional[NftMetadata] = None


class BalancesResponse(CamelModel):
    """The single output contract of every provider."""

    native_balance: NativeBalance = Field(default_factory=NativeBalance)
    tokens: List[TokenBalance] = Field(default_factory=list)
    nfts: List[NftBalance] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "BalancesResponse":
        """The degraded zero-value response."""
        return cls()


class TransactionRequest(CamelModel):
    """Minimal descriptor forwarded to gas estimation."""

    from_address: str = Field(alias="from", examples=["0x0000000000000000000000000000000000000001"])
    to: Optional[str] = Field(default=None, examples=["0x0000000000000000000000000000000000000002"])
    data: Optional[str] = Field(default=None, examples=["0x"])
    value: Optional[Union[int, str]] = Field(default=None, examples=["0x0"])


class GasPriceResponse(CamelModel):
    gas_price: str = Field(examples=["20000000000"])


class GasEstimateResponse(CamelModel):
    gas: str = Field(examples=["21000"])


class HealthResponse(CamelModel):
    chain: str
    tier: str
    healthy: bool


class RpcRequest(CamelModel):
    method: str = Field(examples=["eth_blockNumber"])
    params: list = Field(default_factory=list)


class ChainSummary(CamelModel):
    id: str
    family: str
    chain_id: int
    name: str
    native_symbol: str
    native_decimals: int
    testnet_chain_id: Optional[int] = None
    testnet_name: Optional[str] = None
    supported: bool
