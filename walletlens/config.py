import os
from typing import Iterator, Mapping


GZIP_MINIMUM_SIZE = int(os.getenv("GZIP_MINIMUM_SIZE", "1000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "../logs")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() in {"1", "true", "yes"}

# Per sub-fetch deadline applied by the HTTP transport
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

# Metaplex metadata account layout used to find NFTs by owner over plain RPC.
# Upstream can change it, so it stays configurable.
SOLANA_NFT_ACCOUNT_SIZE = int(os.getenv("SOLANA_NFT_ACCOUNT_SIZE", "679"))
SOLANA_NFT_OWNER_OFFSET = int(os.getenv("SOLANA_NFT_OWNER_OFFSET", "326"))

SOLANA_LAMPORTS_PER_SIGNATURE = int(os.getenv("SOLANA_LAMPORTS_PER_SIGNATURE", "5000"))

TOKEN_METADATA_CACHE_TTL = int(os.getenv("TOKEN_METADATA_CACHE_TTL", "3600"))


class EnvConfigSource(Mapping[str, str]):
    """Read-only view over the process environment used to resolve API keys and endpoints."""

    def __init__(self, environ: Mapping[str, str] = os.environ):
        self._environ = environ

    def __getitem__(self, key: str) -> str:
        return self._environ[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._environ)

    def __len__(self) -> int:
        return len(self._environ)
