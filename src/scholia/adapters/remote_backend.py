"""Remote persistence backend: one JSON round trip per operation."""

from typing import Any, Mapping
from urllib.parse import quote

import httpx

from ..core.errors import NotFoundError, TransportError
from ..core.model import Note, NoteId
from ..core.ports import IdGenerator, NotesBackend
from ..logging_config import get_logger
from .record_codec import normalize, normalize_many

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

_EMPTY = object()


class RemoteBackend(NotesBackend):
    """
    Client for the notes HTTP API:

        GET    /notes        -> Note[]
        POST   /notes        {title, content} -> Note
        PATCH  /notes/{id}   {title?, content?} -> Note
        DELETE /notes/{id}   -> Note | empty
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        id_generator: IdGenerator | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.idgen = id_generator
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if with_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            for key in ("detail", "message"):
                if isinstance(data.get(key), str) and data[key]:
                    return data[key]
        if response.text:
            return response.text
        return f"Request failed with status {response.status_code}"

    async def _request(
        self, method: str, path: str, note_id: NoteId | None = None, body: Any = None
    ) -> Any:
        try:
            response = await self.client.request(
                method,
                self._url(path),
                headers=self._headers(body is not None),
                json=body,
            )
        except httpx.HTTPError as e:
            logger.warning("remote_request_failed", method=method, path=path, error=str(e))
            raise TransportError(f"Network error while contacting API: {e}") from e

        if response.status_code == 404 and note_id is not None:
            raise NotFoundError(note_id, status=404, body=response.text)
        if not response.is_success:
            logger.warning(
                "remote_request_failed",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise TransportError(
                self._error_message(response),
                status=response.status_code,
                body=response.text,
            )

        if not response.content.strip():
            return _EMPTY
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Invalid response from server.",
                status=response.status_code,
                body=response.text,
            ) from e

    def _note_path(self, note_id: NoteId) -> str:
        return f"/notes/{quote(note_id, safe='')}"

    async def list(self) -> list[Note]:
        data = await self._request("GET", "/notes")
        if not isinstance(data, list):
            raise TransportError("Invalid response from server.", status=200, body=data)
        return normalize_many(data, self.idgen)

    async def create(self, title: str, content: str) -> Note:
        sent = {"title": title, "content": content}
        data = await self._request("POST", "/notes", body=sent)
        if not isinstance(data, Mapping):
            raise TransportError("Invalid response from server.", status=200, body=data)
        return normalize({**sent, **{k: v for k, v in data.items() if v is not None}}, self.idgen)

    async def update(self, note_id: NoteId, patch: Mapping[str, Any]) -> Note:
        sent = {k: patch[k] for k in ("title", "content") if patch.get(k) is not None}
        data = await self._request("PATCH", self._note_path(note_id), note_id=note_id, body=sent)
        if not isinstance(data, Mapping):
            raise TransportError("Invalid response from server.", status=200, body=data)
        merged = {"id": note_id, **sent}
        merged.update({k: v for k, v in data.items() if v is not None})
        return normalize(merged, self.idgen)

    async def remove(self, note_id: NoteId) -> Note | None:
        data = await self._request("DELETE", self._note_path(note_id), note_id=note_id)
        if isinstance(data, Mapping) and data.get("id") is not None:
            return normalize(data, self.idgen)
        return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
