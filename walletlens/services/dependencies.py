from fastapi import Request

from walletlens.services.blockchain import BlockchainService


def get_blockchain_service(request: Request) -> BlockchainService:
    return BlockchainService(request.app.state.registry)
