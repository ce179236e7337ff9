"""
Response envelopes shared by all API views
"""
from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response


def success_response(data: Any = None, message: Optional[str] = None, status_code: int = status.HTTP_200_OK) -> Response:
    body = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return Response(body, status=status_code)


def paginated_response(items: Any, meta) -> Response:
    return Response(
        {
            "status": "success",
            "data": items,
            "pagination": meta.as_dict(),
        },
        status=status.HTTP_200_OK,
    )
