"""Standard response envelope shared by every dashboard endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import model_serializer

from app.models.base import CamelModel

T = TypeVar("T")


class ApiResponse(CamelModel, Generic[T]):
    """``{success, data?, error?, timestamp?}``.

    ``error`` and ``timestamp`` are omitted from the JSON body when unset.
    """
    success: bool
    data: T | None = None
    error: str | None = None
    timestamp: str | None = None

    @model_serializer(mode="wrap")
    def omit_unset_meta(self, handler: Any) -> dict[str, Any]:
        payload = handler(self)
        for key in ("error", "timestamp"):
            if payload.get(key) is None:
                payload.pop(key, None)
        if not self.success and payload.get("data") is None:
            payload.pop("data", None)
        return payload
