from pydantic import BaseModel, Field

MISSING_QUERY = "Missing query"
SERVER_ERROR = "Something went wrong"


class ErrorBody(BaseModel):
    """JSON body returned when the relay fails before streaming."""

    error: str = Field(description="Short, user-safe error description")
