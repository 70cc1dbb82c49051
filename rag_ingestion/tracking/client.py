from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from rag_ingestion.logging.logger import Log
from rag_ingestion.tracking.base import utc_timestamp
from rag_ingestion.tracking.exceptions import StatusMappingError
from rag_ingestion.tracking.factory import map_service_response
from rag_ingestion.tracking.models import ErrorType, Stage, StageState, StageStatus

GATEWAY_ERROR_CODES = frozenset({502, 503, 504})


class StageStatusClient:
    """Queries the per-stage status providers over HTTP."""

    def __init__(
        self,
        endpoints: Mapping[Stage, str],
        *,
        http_client: httpx.AsyncClient,
        auth_token: str = "",
    ) -> None:
        missing = [stage.value for stage in Stage if stage not in endpoints]
        if missing:
            raise ValueError(f"Missing status endpoint for stage(s): {missing}")
        self._endpoints = dict(endpoints)
        self._http = http_client
        self._auth_token = auth_token

    async def fetch_stage_status(self, stage: Stage, document_id: str) -> StageStatus:
        """Fetch and map one stage's status, raising on any failure.

        Raises:
            httpx.HTTPError: on transport errors or a non-2xx response.
            StatusMappingError: if the body is not a mappable JSON object.
        """
        url = f"{self._endpoints[stage].rstrip('/')}/status/{quote(document_id, safe='')}"
        headers = {"Accept": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"

        response = await self._http.get(url, headers=headers)
        response.raise_for_status()
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise StatusMappingError(f"{stage.value} returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise StatusMappingError(f"{stage.value} returned {type(payload).__name__}, expected object")
        return map_service_response(stage, payload, document_id)

    async def check_stage_status(self, stage: Stage, document_id: str) -> StageStatus:
        """Like fetch_stage_status, but failures come back as classified statuses."""
        try:
            return await self.fetch_stage_status(stage, document_id)
        except httpx.TransportError as exc:
            Log.warning(f"{stage.value} status unreachable for {document_id}: {exc}")
            return _error_status(stage, document_id, StageState.PENDING, ErrorType.NETWORK, str(exc))
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            message = f"HTTP {code} from {stage.value} status provider"
            if code == 404:
                return _error_status(stage, document_id, StageState.PENDING, ErrorType.NOT_FOUND, message)
            if code in GATEWAY_ERROR_CODES:
                Log.warning(f"{message} for {document_id}")
                return _error_status(stage, document_id, StageState.PENDING, ErrorType.NETWORK, message)
            Log.error(f"{message} for {document_id}")
            return _error_status(stage, document_id, StageState.FAILED, ErrorType.OTHER, message)
        except StatusMappingError as exc:
            Log.error(f"Cannot map {stage.value} status for {document_id}: {exc}")
            return _error_status(stage, document_id, StageState.FAILED, ErrorType.OTHER, str(exc))


def _error_status(
    stage: Stage,
    document_id: str,
    state: StageState,
    error_type: ErrorType,
    message: str,
) -> StageStatus:
    return StageStatus(
        document_id=document_id,
        stage=stage,
        status=state,
        timestamp=utc_timestamp(),
        metadata={"errorType": error_type.value, "errorMessage": message},
    )
