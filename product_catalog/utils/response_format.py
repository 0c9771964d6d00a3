from typing import Any, Mapping

from fastapi.responses import JSONResponse

from product_catalog.utils.status import Status


class ResponseFormat:
    """Envelope shared by every catalog API response: ``{status, message, data}``."""

    def __init__(
        self,
        status: Status = Status.SUCCESS,
        message: str = "SUCCESS",
        data: Any = None,
    ) -> None:
        self.status = status
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "data": self.data,
        }

    def to_response(self, status_code: int = 200, headers: Mapping[str, str] | None = None) -> JSONResponse:
        """Wrap the envelope in a ``JSONResponse``."""
        return JSONResponse(status_code=status_code, content=self.to_dict(), headers=headers)
