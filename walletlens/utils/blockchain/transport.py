import asyncio
import json
from typing import Any, Dict, List, Optional

import aiohttp

from walletlens.config import REQUEST_TIMEOUT_SECONDS
from walletlens.utils.logging import get_logger
from walletlens.utils.types import RequestFn
from .errors import TransportError

logger = get_logger(__name__)

HEADERS = {"accept": "application/json", "content-type": "application/json"}


class AiohttpTransport:
    """
    Default RequestFn: POSTs a JSON body to an endpoint and returns the decoded response.

    The session is created on first use so the transport can be built outside a running loop.
    """

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS):
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=HEADERS)
        return self._session

    async def __call__(self, endpoint: str, body: Dict[str, Any]) -> Any:
        session = self._get_session()
        try:
            async with session.post(endpoint, json=body) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise TransportError(f"HTTP {response.status} from upstream: {text[:200]}")
                raw = await response.text()
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {str(e)}")
        except asyncio.TimeoutError:
            raise TransportError(f"Request timed out after {self._timeout.total}s")

        try:
            return json.loads(raw)
        except ValueError:
            raise TransportError("Malformed JSON in upstream response")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


async def rpc_call(request: RequestFn, endpoint: str, method: str, params: Optional[List[Any]] = None) -> Any:
    """Send one JSON-RPC 2.0 call and return its `result`, raising TransportError on an error envelope."""
    payload = {
        "id": 1,
        "jsonrpc": "2.0",
        "method": method,
        "params": params if params is not None else [],
    }
    data = await request(endpoint, payload)
    if not isinstance(data, dict):
        raise TransportError(f"Unexpected response to {method}: {data!r}")
    if data.get("error") is not None:
        error = data["error"]
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise TransportError(f"{method} returned an error: {message}")
    if "result" not in data:
        raise TransportError(f"{method} returned no result")
    return data["result"]
