"""
HTTP client for the platform's availability API.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List

import requests
from pydantic import ValidationError as PayloadError

from ..domain.exceptions import GatewayError, ValidationError
from ..domain.models import ActiveDaysPatch, DayOverride, FullTemplate
from ..services.gateway import OverrideDeleteResult, OverrideWriteResult, TemplateSaveResult
from .schemas import (
    DayOverridePayload,
    DaySchedulePayload,
    ErrorResponse,
    MessageResponse,
    OverrideWriteResponse,
    TemplateSaveRequest,
)

logger = logging.getLogger(__name__)


class AvailabilityApiClient:
    """
    Client for the doctor availability endpoints.

    Requests are made with ``requests`` on a worker thread so the async
    service never blocks. Every failure (connection error, timeout, non-2xx
    response, malformed body) is raised as a GatewayError; nothing is retried
    here.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. ``http://localhost:5002/api``
            token: Bearer token of the signed-in doctor
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, str] | None = None,
        payload: Dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise GatewayError(f"Request to {path} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Could not reach availability API: {e}") from e

        if not response.ok:
            raise self._error_from_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    @staticmethod
    def _error_from_response(response: requests.Response) -> GatewayError:
        """
        Turn an error response into a GatewayError.

        Error bodies look like ``{"error": ...}`` or ``{"error": ..., "details": ...}``.
        """
        try:
            body = ErrorResponse.model_validate(response.json())
            message, details = body.error, body.details
        except (ValueError, PayloadError):
            message, details = response.reason or "Request failed", None

        return GatewayError(
            f"Availability API returned {response.status_code}: {message}",
            status_code=response.status_code,
            details=details,
        )

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        return await asyncio.to_thread(self._request, method, path, **kwargs)

    async def get_weekly_template(self) -> FullTemplate:
        data = await self._call("GET", "/availability/template")

        # Bare list or wrapped in {"template": [...]} / {"schedules": [...]}
        if isinstance(data, dict):
            data = data.get("template", data.get("schedules", []))

        try:
            days = [DaySchedulePayload.model_validate(item).to_domain() for item in data]
            return FullTemplate.complete(days)
        except (TypeError, ValueError, ValidationError) as e:
            raise GatewayError(f"Malformed weekly template: {e}") from e

    async def save_weekly_template(self, patch: ActiveDaysPatch) -> TemplateSaveResult:
        request = TemplateSaveRequest(
            schedules=[DaySchedulePayload.from_domain(day) for day in patch.days]
        )
        data = await self._call("POST", "/availability/template", payload=request.to_wire())
        return TemplateSaveResult(message=self._parse_message(data))

    async def list_overrides(
        self,
        start: date,
        end: date,
        include_unavailable: bool,
    ) -> List[DayOverride]:
        params = {
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "includeUnavailable": "true" if include_unavailable else "false",
        }
        data = await self._call("GET", "/availability/doctor", params=params)

        if isinstance(data, dict):
            data = data.get("availability", [])

        try:
            return [DayOverridePayload.model_validate(item).to_domain() for item in data]
        except (TypeError, ValueError, ValidationError) as e:
            raise GatewayError(f"Malformed availability list: {e}") from e

    async def create_override(self, override: DayOverride) -> OverrideWriteResult:
        payload = DayOverridePayload.from_domain(override).to_wire()
        payload.pop("id", None)
        data = await self._call("POST", "/availability/set", payload=payload)
        return self._parse_write(data, override, created=True)

    async def update_override(self, override_id: str, override: DayOverride) -> OverrideWriteResult:
        payload = DayOverridePayload.from_domain(override).to_wire()
        payload.pop("id", None)
        data = await self._call("PUT", f"/availability/{override_id}", payload=payload)
        return self._parse_write(data, override, created=False)

    async def delete_override(self, override_id: str) -> OverrideDeleteResult:
        data = await self._call("DELETE", f"/availability/{override_id}")
        return OverrideDeleteResult(
            message=self._parse_message(data),
            override_id=override_id,
        )

    @staticmethod
    def _parse_message(data: Any) -> str:
        try:
            return MessageResponse.model_validate(data).message
        except PayloadError as e:
            raise GatewayError(f"Malformed response: {e}") from e

    @staticmethod
    def _parse_write(data: Any, sent: DayOverride, created: bool) -> OverrideWriteResult:
        try:
            body = OverrideWriteResponse.model_validate(data)
            stored = body.availability.to_domain() if body.availability else sent.copy()
        except (TypeError, ValueError, ValidationError) as e:
            raise GatewayError(f"Malformed availability response: {e}") from e

        return OverrideWriteResult(
            message=body.message,
            warning=body.warning,
            override=stored,
            created=created,
        )
