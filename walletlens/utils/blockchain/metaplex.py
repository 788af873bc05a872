import struct
from typing import Any, Dict, Tuple

import base58
from solders.pubkey import Pubkey

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"

# first byte of a Metaplex MetadataV1 account
METADATA_V1_KEY = 4


def get_metadata_account(mint_address: str) -> Pubkey:
    """Find the metadata account for a given mint address"""
    metadata_program_id = Pubkey.from_string(METADATA_PROGRAM_ID)
    mint_pubkey = Pubkey.from_string(mint_address)

    # Find PDA for metadata
    seeds = [
        bytes("metadata", "utf-8"),
        bytes(metadata_program_id),
        bytes(mint_pubkey),
    ]
    metadata_address, _ = Pubkey.find_program_address(seeds, metadata_program_id)
    return metadata_address


def _read_pubkey(data: bytes, i: int) -> Tuple[str, int]:
    raw = struct.unpack_from("<32s", data, i)[0]
    return base58.b58encode(raw).decode("utf-8"), i + 32


def _read_string(data: bytes, i: int) -> Tuple[str, int]:
    length = struct.unpack_from("<I", data, i)[0]
    i += 4
    raw = struct.unpack_from(f"<{length}s", data, i)[0]
    return raw.decode("utf-8", errors="replace").strip("\x00").strip(), i + length


def unpack_metadata_account(data: bytes) -> Dict[str, Any]:
    """
    Decode a Metaplex MetadataV1 account.

    Layout: key(u8) | update_authority(32) | mint(32) | name | symbol | uri
    | seller_fee_basis_points(u16) | creators(option<vec>) | primary_sale_happened | is_mutable

    Raises ValueError on any other account kind or a truncated buffer.
    """
    if not data or data[0] != METADATA_V1_KEY:
        raise ValueError("Not a Metaplex metadata account")
    try:
        i = 1
        update_authority, i = _read_pubkey(data, i)
        mint, i = _read_pubkey(data, i)
        name, i = _read_string(data, i)
        symbol, i = _read_string(data, i)
        uri, i = _read_string(data, i)
        fee = struct.unpack_from("<H", data, i)[0]
        i += 2

        creators = []
        has_creator = data[i]
        i += 1
        if has_creator:
            creator_len = struct.unpack_from("<I", data, i)[0]
            i += 4
            for _ in range(creator_len):
                address, i = _read_pubkey(data, i)
                verified, share = struct.unpack_from("<BB", data, i)
                i += 2
                creators.append({"address": address, "verified": bool(verified), "share": share})

        primary_sale_happened, is_mutable = struct.unpack_from("<BB", data, i)
    except (struct.error, IndexError) as e:
        raise ValueError(f"Truncated metadata account: {str(e)}")

    return {
        "update_authority": update_authority,
        "mint": mint,
        "data": {
            "name": name,
            "symbol": symbol,
            "uri": uri,
            "seller_fee_basis_points": fee,
            "creators": creators,
        },
        "primary_sale_happened": bool(primary_sale_happened),
        "is_mutable": bool(is_mutable),
    }
