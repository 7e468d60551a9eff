"""
HTTP implementation of the Healify remote service.

Talks to the JSON envelope API over httpx and normalizes every failure
into the app.errors taxonomy:
- timeouts / transport errors      -> ServiceError
- 401 / 403                        -> UnauthorizedError
- 400 / 422                        -> ValidationError
- anything else unsuccessful       -> ServiceError
- malformed or partial bodies      -> ServiceError
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar

import httpx

from app.catalog import AssessmentType
from app.errors import (
    HealifyError,
    InvalidCredentialsError,
    RegistrationRejectedError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)
from app.models import HistoryEntry, PredictionResult
from app.remote.base import HealthService, LoginResult
from app.remote.wire import (
    account_from_wire,
    history_from_wire,
    prediction_from_wire,
    profile_from_wire,
    profile_to_wire,
)
from app.schemas.health import Envelope, LoginData
from auth.models import Profile

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT_SECONDS = 10.0

UNAUTHORIZED_STATUSES = (401, 403)
VALIDATION_STATUSES = (400, 422)


class HttpHealthService(HealthService):
    """
    Remote service over HTTP.

    Usage:
        service = HttpHealthService(base_url="http://localhost:5000/api")
        result = await service.login("user@example.com", "password123")

    A shared httpx.AsyncClient may be injected (its lifetime then belongs
    to the caller); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._transport = transport

    @property
    def source_name(self) -> str:
        return "http"

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> LoginResult:
        try:
            data = await self._request(
                "POST",
                "/auth/login",
                json={"email": email, "password": password},
                failure_message="Login failed. Please try again.",
            )
        except (UnauthorizedError, ValidationError) as e:
            raise InvalidCredentialsError(e.message) from e

        login_data = self._parse(lambda d: LoginData.model_validate(d), data)
        account = self._parse(account_from_wire, login_data.user.model_dump())
        return LoginResult(credential=login_data.token, account=account)

    async def register(self, email: str, password: str) -> str:
        try:
            return await self._request(
                "POST",
                "/auth/register",
                json={"email": email, "password": password},
                failure_message="Registration failed. Please try again.",
                return_message=True,
            )
        except ValidationError as e:
            raise RegistrationRejectedError(e.message) from e
        except ServiceError as e:
            if e.status_code == 409:
                raise RegistrationRejectedError(e.message, status_code=409) from e
            raise

    async def get_profile(self, credential: str) -> Profile:
        data = await self._request(
            "GET",
            "/profile",
            credential=credential,
            failure_message="Failed to load profile.",
        )
        return self._parse(profile_from_wire, data)

    async def update_profile(self, credential: str, profile: Profile) -> Profile:
        data = await self._request(
            "PUT",
            "/profile",
            credential=credential,
            json=profile_to_wire(profile),
            failure_message="Failed to update profile. Please try again.",
        )
        return self._parse(profile_from_wire, data)

    async def score(
        self,
        credential: str,
        assessment_type: AssessmentType,
        answers: Mapping[str, int],
    ) -> PredictionResult:
        data = await self._request(
            "POST",
            f"/predict/{assessment_type.value}",
            credential=credential,
            json={"answers": dict(answers)},
            failure_message="Failed to generate prediction. Please try again.",
        )
        result = self._parse(prediction_from_wire, data)
        if result.disease != assessment_type:
            raise ServiceError("Prediction returned for a different assessment")
        return result

    async def get_history(self, credential: str) -> List[HistoryEntry]:
        data = await self._request(
            "GET",
            "/predictions/history",
            credential=credential,
            failure_message="Failed to load prediction history",
        )
        return self._parse(history_from_wire, data)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.request(method, url, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        credential: Optional[str] = None,
        json: Optional[dict] = None,
        return_message: bool = False,
    ) -> Any:
        """
        Issue one request and unwrap the envelope.

        Returns:
            Envelope `data` (or `message` when return_message is set)
        """
        headers = {"Content-Type": "application/json"}
        if credential:
            headers["Authorization"] = f"Bearer {credential}"

        try:
            response = await self._send(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                json=json,
            )
        except httpx.TimeoutException as e:
            _logger.warning(f"{method} {path} timed out: {e}")
            raise ServiceError("The service took too long to respond. Please try again.") from e
        except httpx.HTTPError as e:
            _logger.warning(f"{method} {path} failed: {e}")
            raise ServiceError(f"Network error: {e}") from e

        envelope = self._read_envelope(response)

        if response.is_success and envelope is not None and envelope.success:
            return envelope.message if return_message else envelope.data

        status = response.status_code
        if response.is_success:
            # 2xx transport status with a failure envelope
            status = envelope.status_code if envelope is not None else status
        message = (envelope.message if envelope is not None else "") or failure_message

        _logger.info(f"{method} {path} -> {status}: {message}")
        raise self._error_for(status, message)

    @staticmethod
    def _read_envelope(response: httpx.Response) -> Optional[Envelope]:
        try:
            return Envelope.model_validate(response.json())
        except ValueError:
            return None

    @staticmethod
    def _error_for(status: int, message: str) -> HealifyError:
        if status in UNAUTHORIZED_STATUSES:
            return UnauthorizedError(message)
        if status in VALIDATION_STATUSES:
            return ValidationError(message)
        return ServiceError(message, status_code=status)

    @staticmethod
    def _parse(parser: Callable[[Any], T], data: Any) -> T:
        try:
            return parser(data)
        except (ValueError, KeyError, TypeError) as e:
            _logger.warning(f"Malformed service response: {e}")
            raise ServiceError("Received an incomplete response from the service.") from e
