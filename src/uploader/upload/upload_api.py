"""HTTP route for uploading media by URL."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from ..api.errors import bad_request_error
from ..auth.auth_dependencies import require_capability
from ..auth.auth_service import UPLOAD_FILES, TokenClaims
from .upload_models import ErrorKind
from .upload_schemas import UploadErrorSchema, UploadRequestSchema, UploadSuccessSchema
from .upload_service import UploadService

API_PREFIX = "/api/v2"

ERROR_CODES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_URL: "invalid_url",
    ErrorKind.UNSUPPORTED_TYPE: "invalid_file_type",
    ErrorKind.DOWNLOAD_FAILED: "upload_error",
    ErrorKind.UPLOAD_ERROR: "upload_error",
    ErrorKind.ATTACHMENT_ERROR: "attachment_error",
}

logger = structlog.get_logger(__name__)


def get_upload_service(request: Request) -> UploadService:
    """Fetch upload service from application state."""
    try:
        return request.app.state.upload_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("UploadService is not configured") from exc


async def read_file_url(request: Request) -> Any:
    """Pull ``file_url`` from the query string, a JSON body or a form body."""
    if "file_url" in request.query_params:
        return request.query_params["file_url"]

    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type == "application/json":
        try:
            body = await request.json()
        except ValueError:
            return None
        return body.get("file_url") if isinstance(body, dict) else None
    if content_type in {"application/x-www-form-urlencoded", "multipart/form-data"}:
        form = await request.form()
        return form.get("file_url")
    return None


def build_upload_router(route_slug: str) -> APIRouter:
    """Mount the upload endpoint under the operator-chosen slug."""
    router = APIRouter(prefix=API_PREFIX, tags=["media"])

    @router.post(
        f"/{route_slug}",
        response_model=UploadSuccessSchema,
        responses={400: {"model": UploadErrorSchema}},
        openapi_extra={
            "requestBody": {
                "content": {
                    "application/json": {"schema": UploadRequestSchema.model_json_schema()}
                }
            }
        },
    )
    async def upload_media(
        request: Request,
        claims: TokenClaims = Depends(require_capability(UPLOAD_FILES)),
        service: UploadService = Depends(get_upload_service),
    ) -> UploadSuccessSchema:
        """Download ``file_url`` into the media library and return the attachment."""
        file_url = await read_file_url(request)
        if file_url is None:
            raise bad_request_error("invalid_url", "Missing parameter(s): file_url")

        outcome = await service.upload(file_url)
        if outcome.failure is not None:
            code = ERROR_CODES[outcome.failure.kind]
            logger.info(
                "upload.request.rejected",
                subject=claims.subject,
                code=code,
                kind=outcome.failure.kind.value,
            )
            raise bad_request_error(code, outcome.failure.message)

        record = outcome.record
        if record is None or outcome.url is None:
            raise RuntimeError("Successful upload outcome is missing its attachment")
        logger.info(
            "upload.request.accepted",
            subject=claims.subject,
            attachment_id=record.id,
        )
        return UploadSuccessSchema(attachment_id=record.id, url=outcome.url)

    return router
