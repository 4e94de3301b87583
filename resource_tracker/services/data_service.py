"""Remote data service - authentication and the resources table, hosted by Supabase."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import httpx

from resource_tracker.config import settings
from resource_tracker.errors import NotAuthenticated, NotFoundError, ServiceError
from resource_tracker.logging_config import get_logger
from resource_tracker.schemas.resource import Resource
from resource_tracker.schemas.user import Identity, SignUpOutcome

logger = get_logger(__name__)

RESOURCES_TABLE = "resources"


class RemoteDataService(Protocol):
    """Operations the application needs from its backend.

    Every table operation is scoped by the backend so a caller only sees or
    affects rows it owns. Failures raise ServiceError (NotFoundError when the
    target row does not exist for the caller).
    """

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> SignUpOutcome: ...

    async def sign_in(self, email: str, password: str) -> Identity: ...

    async def sign_out(self) -> None: ...

    async def get_session(self) -> Optional[Identity]: ...

    async def update_identity(self, metadata: Dict[str, Any]) -> Identity: ...

    async def select_resources(self, owner_id: str) -> List[Resource]: ...

    async def insert_resource(self, record: Dict[str, Any]) -> Resource: ...

    async def update_resource(self, resource_id: str, fields: Dict[str, Any]) -> Resource: ...

    async def delete_resource(self, resource_id: str) -> None: ...


def _error_message(response: httpx.Response) -> str:
    """Extract the human readable message from an auth or PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return response.reason_phrase or f"HTTP {response.status_code}"


class SupabaseDataService:
    """Client for the Supabase auth (GoTrue) and REST (PostgREST) endpoints.

    Holds the access token of the signed-in user in memory; the token is
    sent as bearer credential so row level security scopes the table to the
    caller.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (url or settings.SUPABASE_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.timeout = timeout or settings.SUPABASE_TIMEOUT
        self.access_token: Optional[str] = None

        if not self.anon_key:
            logger.warning("supabase_anon_key_missing", url=self.base_url)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
                return await client.request(
                    method, path, params=params, json=json, headers=self._headers(headers)
                )
        except httpx.HTTPError as e:
            logger.error("supabase_request_failed", method=method, path=path, error=str(e))
            raise ServiceError(f"Could not reach the data service: {e}")

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._send(method, path, **kwargs)
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "supabase_request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise ServiceError(message)
        return response

    # Auth

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> SignUpOutcome:
        response = await self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata},
        )
        body = response.json()
        if body.get("access_token"):
            self.access_token = body["access_token"]
            return SignUpOutcome(identity=Identity.from_auth_user(body["user"]))

        # Email confirmation required: the body is the unconfirmed user
        user = body.get("user") or body
        identity = Identity.from_auth_user(user) if user.get("id") else None
        return SignUpOutcome(identity=identity, pending_confirmation=True)

    async def sign_in(self, email: str, password: str) -> Identity:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        body = response.json()
        self.access_token = body["access_token"]
        return Identity.from_auth_user(body["user"])

    async def sign_out(self) -> None:
        if not self.access_token:
            return
        try:
            await self._request("POST", "/auth/v1/logout")
        finally:
            self.access_token = None

    async def get_session(self) -> Optional[Identity]:
        if not self.access_token:
            return None
        response = await self._send("GET", "/auth/v1/user")
        if response.status_code in (401, 403):
            # Expired or revoked token
            self.access_token = None
            return None
        if response.is_error:
            raise ServiceError(_error_message(response))
        return Identity.from_auth_user(response.json())

    async def update_identity(self, metadata: Dict[str, Any]) -> Identity:
        if not self.access_token:
            raise NotAuthenticated()
        response = await self._request("PUT", "/auth/v1/user", json={"data": metadata})
        return Identity.from_auth_user(response.json())

    # Resources table

    async def select_resources(self, owner_id: str) -> List[Resource]:
        response = await self._request(
            "GET",
            f"/rest/v1/{RESOURCES_TABLE}",
            params={
                "select": "*",
                "user_id": f"eq.{owner_id}",
                "order": "created_at.desc",
            },
        )
        return [Resource.model_validate(row) for row in response.json()]

    async def insert_resource(self, record: Dict[str, Any]) -> Resource:
        response = await self._request(
            "POST",
            f"/rest/v1/{RESOURCES_TABLE}",
            json=record,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise ServiceError("The data service did not return the created resource")
        return Resource.model_validate(rows[0])

    async def update_resource(self, resource_id: str, fields: Dict[str, Any]) -> Resource:
        payload = dict(fields)
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        response = await self._request(
            "PATCH",
            f"/rest/v1/{RESOURCES_TABLE}",
            params={"id": f"eq.{resource_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise NotFoundError()
        return Resource.model_validate(rows[0])

    async def delete_resource(self, resource_id: str) -> None:
        response = await self._request(
            "DELETE",
            f"/rest/v1/{RESOURCES_TABLE}",
            params={"id": f"eq.{resource_id}"},
            headers={"Prefer": "return=representation"},
        )
        if not response.json():
            raise NotFoundError()
