"""
HTTP client for the clinic REST backend.

Every request carries ``Authorization: Bearer <token>`` when the session has
a token. Failures are mapped onto the package exception taxonomy with the
server ``detail`` text kept verbatim. Nothing is retried: a failed request
is terminal for the action that issued it.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar

import httpx

from ..exceptions import ConflictException, NetworkException, NotAuthorizedError
from ..schemas.base import WireModel
from ..utils.config import DEFAULT_TIMEOUT_SECONDS, FrontdeskSettings, validate_api_url

logger = logging.getLogger(__name__)

W = TypeVar("W", bound=WireModel)

REQUEST_FAILED = "Error en la solicitud"
DELETE_FAILED = "Error al eliminar"


class TokenSource(Protocol):
    """Anything exposing the current bearer token, usually an ``AuthSession``."""

    @property
    def token(self) -> Optional[str]: ...


def extract_detail(response: httpx.Response) -> Optional[str]:
    """
    Pull the ``detail`` message out of an error response.

    Returns None when the body is not JSON or carries no usable detail.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    detail = body.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    if isinstance(detail, list):
        messages = [str(item) for item in detail if item]
        return "; ".join(messages) or None
    return None


def parse_one(schema: Type[W], payload: Any) -> W:
    return schema.parse(payload)


def parse_many(schema: Type[W], payload: Any) -> List[W]:
    """Parse a list answer; paginated ``{"results": [...]}`` bodies are unwrapped."""
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        payload = payload["results"]
    if not isinstance(payload, list):
        raise NetworkException(
            message="Respuesta inesperada del servidor",
            server_detail=None,
        )
    return [schema.parse(item) for item in payload]


class ApiClient:
    """Async client for the clinic backend."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        session: Optional[TokenSource] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL, e.g. ``http://localhost:8000/api``
            session: Source of the bearer token; requests are unauthenticated
                while it has none
            timeout: Request timeout in seconds
            transport: Custom httpx transport, used by tests
        """
        self.base_url = validate_api_url(base_url)
        self.session = session
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: FrontdeskSettings,
        session: Optional[TokenSource] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ApiClient":
        return cls(
            base_url=settings.api_url,
            session=session,
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.session.token if self.session is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        fallback_message: str = REQUEST_FAILED,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Returns:
            Decoded JSON, or None for empty answers such as ``204 No Content``

        Raises:
            ConflictException: On HTTP 409
            NotAuthorizedError: On HTTP 401 or 403
            NetworkException: On transport failures and any other non-2xx answer
        """
        url = self.url_for(path)
        try:
            response = await self._client.request(
                method, url, params=params, json=json, headers=self._headers()
            )
        except httpx.RequestError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise NetworkException(
                message=fallback_message, url=url, original_error=e
            )

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise NetworkException(
                    message="Respuesta inesperada del servidor",
                    status_code=response.status_code,
                    url=url,
                    original_error=e,
                )

        detail = extract_detail(response)
        logger.info(f"{method} {url} answered {response.status_code}: {detail}")

        if response.status_code == 409:
            raise ConflictException(
                message=fallback_message,
                rule_name="backend_conflict",
                server_detail=detail,
            )
        if response.status_code in (401, 403):
            raise NotAuthorizedError(
                message=detail or NotAuthorizedError.fallback_message,
                status_code=response.status_code,
            )
        raise NetworkException(
            message=detail or fallback_message,
            status_code=response.status_code,
            url=url,
            server_detail=detail,
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path, fallback_message=DELETE_FAILED)
