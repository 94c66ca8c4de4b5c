"""Rendering of scheduling errors and service results as DRF responses."""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.entities import ServiceResult
from .domain.errors import SchedulingError

STATUS_BY_CODE = {
    "not_authorized": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "insufficient_funds": status.HTTP_402_PAYMENT_REQUIRED,
    "ineligible": status.HTTP_409_CONFLICT,
    "external_service": status.HTTP_502_BAD_GATEWAY,
}


def status_for(code: str | None) -> int:
    return STATUS_BY_CODE.get(code or "", status.HTTP_400_BAD_REQUEST)


def error_response(exc: SchedulingError) -> Response:
    return Response({"error": exc.message, "code": exc.code}, status=status_for(exc.code))


def result_response(result: ServiceResult, success_status: int = status.HTTP_200_OK) -> Response:
    if result.ok:
        return Response({"ok": True}, status=success_status)
    return Response({"ok": False, **result.to_dict()}, status=status_for(result.code))
