from typing import Optional


class BlockchainServiceError(Exception):
    """Base error for the balance layer"""
    def __init__(self, message: str, chain: Optional[str] = None):
        self.message = message
        self.chain = chain
        super().__init__(self.message)


class ConfigurationError(BlockchainServiceError):
    """A credential or endpoint is missing for the requested tier."""


class TransportError(BlockchainServiceError):
    """An upstream call failed: timeout, non-2xx, malformed JSON or an RPC error envelope."""


class UnsupportedChainError(BlockchainServiceError):
    """No provider is mapped to the requested chain."""


class PartialDataError(BlockchainServiceError):
    """One sub-fetch of a balance request failed. Never leaves the strategy layer."""

    def __init__(self, message: str, slot: str, chain: Optional[str] = None):
        self.slot = slot
        super().__init__(message, chain=chain)
