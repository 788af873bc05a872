from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status

from walletlens.models.schemas.balances import (
    BalancesResponse,
    ChainSummary,
    GasEstimateResponse,
    GasPriceResponse,
    HealthResponse,
    RpcRequest,
    TransactionRequest,
)
from walletlens.services.blockchain import BlockchainService
from walletlens.services.dependencies import get_blockchain_service
from walletlens.utils.blockchain.errors import (
    BlockchainServiceError,
    ConfigurationError,
    TransportError,
    UnsupportedChainError,
)
from walletlens.utils.types import NetworkTier

router = APIRouter(prefix="/blockchain", tags=["Blockchain"])


def _to_http_error(e: BlockchainServiceError) -> HTTPException:
    if isinstance(e, UnsupportedChainError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    if isinstance(e, TransportError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.get("/chains", response_model=List[ChainSummary], response_model_by_alias=True)
async def list_chains(service: BlockchainService = Depends(get_blockchain_service)):
    return service.list_chains()


@router.get("/{chain}/{address}/balances", response_model=BalancesResponse, response_model_by_alias=True)
async def get_balances(
    chain: str,
    address: str,
    tier: NetworkTier = NetworkTier.MAINNET,
    service: BlockchainService = Depends(get_blockchain_service),
):
    """Native, token and NFT balances. Upstream failures degrade to zero balances."""
    try:
        return await service.get_balances(chain, address, tier)
    except BlockchainServiceError as e:
        raise _to_http_error(e)


@router.get("/{chain}/gas-price", response_model=GasPriceResponse, response_model_by_alias=True)
async def get_gas_price(
    chain: str,
    tier: NetworkTier = NetworkTier.MAINNET,
    service: BlockchainService = Depends(get_blockchain_service),
):
    try:
        return GasPriceResponse(gas_price=await service.get_gas_price(chain, tier))
    except BlockchainServiceError as e:
        raise _to_http_error(e)


@router.post("/{chain}/estimate-gas", response_model=GasEstimateResponse, response_model_by_alias=True)
async def estimate_gas(
    chain: str,
    req: TransactionRequest,
    tier: NetworkTier = NetworkTier.MAINNET,
    service: BlockchainService = Depends(get_blockchain_service),
):
    try:
        return GasEstimateResponse(gas=await service.estimate_gas(chain, req, tier))
    except BlockchainServiceError as e:
        raise _to_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{chain}/rpc")
async def call_rpc_method(
    chain: str,
    req: RpcRequest,
    tier: NetworkTier = NetworkTier.MAINNET,
    service: BlockchainService = Depends(get_blockchain_service),
) -> Any:
    try:
        return await service.call_rpc_method(chain, req.method, req.params, tier)
    except BlockchainServiceError as e:
        raise _to_http_error(e)


@router.get("/{chain}/health", response_model=HealthResponse)
async def check_health(
    chain: str,
    tier: NetworkTier = NetworkTier.MAINNET,
    service: BlockchainService = Depends(get_blockchain_service),
):
    try:
        healthy = await service.check_health(chain, tier)
    except BlockchainServiceError as e:
        raise _to_http_error(e)
    return HealthResponse(chain=chain, tier=tier.value, healthy=healthy)
