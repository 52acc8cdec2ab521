from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorCode(BaseModel):
    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal server error occurred",
                    "details": None,
                }
            }
        }
    )

    error: ErrorCode
