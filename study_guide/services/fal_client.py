"""
fal.ai client — storage upload and queued workflow runs over plain HTTP.

Workflows are submitted to the queue, polled until COMPLETED, and their
result fetched from the response URL the queue hands back.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from .errors import InfographicError

logger = logging.getLogger(__name__)

TERMINAL_OK = "COMPLETED"
PENDING_STATUSES = {"IN_QUEUE", "IN_PROGRESS"}


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error") or data.get("message")
        if isinstance(detail, str) and detail:
            return detail
    return f"HTTP {resp.status_code} {resp.reason_phrase}".strip()


def _json_object(resp: httpx.Response, what: str) -> dict[str, Any]:
    data = resp.json()
    if not isinstance(data, dict):
        raise InfographicError(f"{what} returned an unexpected response: expected a JSON object")
    return data


def _app_root(workflow_name: str) -> str:
    """Status and result URLs live under owner/app, without any sub-path."""
    return "/".join(workflow_name.split("/")[:2])


class FalClient:
    def __init__(
        self,
        api_key: str,
        *,
        queue_url: str,
        storage_url: str,
        poll_interval: float = 1.0,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.queue_url = queue_url.rstrip("/")
        self.storage_url = storage_url
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._headers = {"Authorization": f"Key {api_key}"}
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=60.0, headers=self._headers, transport=self._transport
        )

    async def upload_binary(self, content: bytes, content_type: str, file_name: str) -> str:
        """Upload bytes to fal storage and return the public file URL."""
        try:
            async with self._client() as client:
                resp = await client.post(
                    self.storage_url,
                    json={"content_type": content_type, "file_name": file_name},
                )
                if not resp.is_success:
                    raise InfographicError(f"Failed to upload image: {_error_detail(resp)}")
                target = _json_object(resp, "fal storage")
                upload_url = target.get("upload_url")
                file_url = target.get("file_url")
                if not upload_url or not file_url:
                    raise InfographicError("Failed to upload image: storage returned no upload URL")

            # Signed upload URL; the API key is not sent there.
            async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as plain:
                put = await plain.put(
                    upload_url, content=content, headers={"Content-Type": content_type}
                )
                if not put.is_success:
                    raise InfographicError(f"Failed to upload image: {_error_detail(put)}")
        except (httpx.HTTPError, ValueError) as e:
            raise InfographicError(f"Failed to upload image: {type(e).__name__}: {e}") from e

        logger.info(f"Uploaded {file_name} ({len(content)} bytes) to fal storage")
        return file_url

    async def run_workflow(self, workflow_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Submit a workflow, wait for it to finish, and return its output."""
        try:
            async with self._client() as client:
                resp = await client.post(f"{self.queue_url}/{workflow_name}", json=arguments)
                if not resp.is_success:
                    raise InfographicError(f"{workflow_name} rejected the request: {_error_detail(resp)}")
                submitted = _json_object(resp, workflow_name)
                request_id = submitted.get("request_id")
                if not request_id:
                    raise InfographicError(f"{workflow_name} returned no request id")

                root = f"{self.queue_url}/{_app_root(workflow_name)}/requests/{request_id}"
                status_url = submitted.get("status_url") or f"{root}/status"
                response_url = submitted.get("response_url") or root

                await self._wait_for_completion(client, workflow_name, status_url)

                result = await client.get(response_url)
                if not result.is_success:
                    raise InfographicError(f"{workflow_name} failed: {_error_detail(result)}")
                return _json_object(result, workflow_name)
        except (httpx.HTTPError, ValueError) as e:
            raise InfographicError(f"{workflow_name} request failed: {type(e).__name__}: {e}") from e

    async def _wait_for_completion(
        self, client: httpx.AsyncClient, workflow_name: str, status_url: str
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        while True:
            resp = await client.get(status_url, params={"logs": 1})
            if not resp.is_success:
                raise InfographicError(f"{workflow_name} status check failed: {_error_detail(resp)}")
            body = _json_object(resp, f"{workflow_name} status check")
            status = body.get("status")
            if status == TERMINAL_OK:
                return
            if status not in PENDING_STATUSES:
                raise InfographicError(f"{workflow_name} ended with status {status}")
            if status == "IN_PROGRESS":
                logs = body.get("logs")
                for entry in logs if isinstance(logs, list) else []:
                    if isinstance(entry, dict):
                        logger.debug(f"{workflow_name}: {entry.get('message', '')}")
            if loop.time() >= deadline:
                raise InfographicError(f"{workflow_name} did not finish within {self.timeout:.0f}s")
            await asyncio.sleep(self.poll_interval)
