from typing import Union

from .types import Chain
from walletlens.utils.types import ChainIdentifier
from walletlens.utils.blockchain.errors import UnsupportedChainError
from .data import CHAIN_DATA_MAP


def to_chain_identifier(chain: Union[ChainIdentifier, str]) -> ChainIdentifier:
    """Coerce a raw string into a ChainIdentifier."""
    if isinstance(chain, ChainIdentifier):
        return chain
    try:
        return ChainIdentifier(str(chain).strip().lower())
    except ValueError:
        raise UnsupportedChainError(f"No implementation for chain: {chain}", chain=str(chain))


def get_chain_by_identifier(chain: Union[ChainIdentifier, str]) -> Chain:
    """Get chain data by its identifier."""
    identifier = to_chain_identifier(chain)
    data = CHAIN_DATA_MAP.get(identifier)
    if data is None:
        raise UnsupportedChainError(f"Chain {identifier.value} not found", chain=identifier.value)
    return data


def get_all_chains() -> list[Chain]:
    """Get all chains."""
    return list(CHAIN_DATA_MAP.values())
