"""HTTP adapter for the storage content API."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..models import DEFAULT_API_URL, CommitInfo, SessionState
from ..errors import StorageAPIError

logger = logging.getLogger(__name__)

API_ARG_HEADER = "Dropbox-API-Arg"


class ContentAPIClient:
    """
    HTTP client adapter for upload calls.

    Implements IStorageClient protocol. Arguments travel as JSON in the
    API arg header, the request body is the raw bytes.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self._access_token}"},
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post(self, endpoint: str, arg: Dict[str, Any], data: bytes) -> httpx.Response:
        if not self._client:
            raise RuntimeError("ContentAPIClient not initialized. Use 'async with' context.")

        headers = {
            API_ARG_HEADER: json.dumps(arg, separators=(",", ":")),
            "Content-Type": "application/octet-stream",
        }
        logger.debug("POST %s (%d bytes)", endpoint, len(data))
        response = await self._client.post(endpoint, content=data, headers=headers)

        if response.status_code >= 400:
            try:
                error_detail = response.json()
            except ValueError:
                error_detail = response.text
            raise StorageAPIError(response.status_code, endpoint, error_detail)

        return response

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        return response.json()

    async def session_start(self, data: bytes) -> str:
        response = await self._post("/2/files/upload_session/start", {"close": False}, data)
        session_id = self._json(response).get("session_id")
        if not session_id:
            raise StorageAPIError(
                response.status_code,
                "/2/files/upload_session/start",
                "response carried no session_id",
            )
        return session_id

    async def session_append(self, session_id: str, offset: int, data: bytes) -> None:
        arg = {
            "cursor": SessionState(session_id, offset).cursor(),
            "close": False,
        }
        await self._post("/2/files/upload_session/append_v2", arg, data)

    async def session_finish(
        self,
        session_id: str,
        offset: int,
        commit: CommitInfo,
        data: bytes,
    ) -> Dict[str, Any]:
        arg = {
            "cursor": SessionState(session_id, offset).cursor(),
            "commit": commit.to_api_arg(),
        }
        response = await self._post("/2/files/upload_session/finish", arg, data)
        return self._json(response)

    async def upload(self, commit: CommitInfo, data: bytes) -> Dict[str, Any]:
        response = await self._post("/2/files/upload", commit.to_api_arg(), data)
        return self._json(response)
