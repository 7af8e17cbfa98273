####################################
# --- Request/response schemas --- #
####################################

from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
)
from pydantic.alias_generators import to_camel


class ErrorNumber(IntEnum):
    """Enumeration of error kinds to their stable error numbers."""
    EXISTS = 1
    TOOLARGE = 2
    REQUIRED = 3
    NOTFOUND = 4
    TOOSMALL = 5
    NOTNULL = 6
    UNKNOWN = 7


ERROR_DESCRIPTIONS = {
    ErrorNumber.EXISTS: "The entity already exists",
    ErrorNumber.TOOLARGE: "The parameter value is too large",
    ErrorNumber.REQUIRED: "The parameter is required",
    ErrorNumber.NOTFOUND: "The entity could not be found",
    ErrorNumber.TOOSMALL: "The parameter value is too small",
    ErrorNumber.NOTNULL: "The parameter cannot be null",
    ErrorNumber.UNKNOWN: "An unknown error occurred",
}


class ErrorResponse(BaseModel):
    """Structured error returned by every failing operation."""
    error_number: ErrorNumber = Field(description="Number corresponding to the type of error.")
    parameter_name: Optional[str] = Field(
        None,
        description="Parameter being referenced in the error, if relevant to the error.",
        json_schema_extra={"example": "fileName"},
    )
    parameter_value: Optional[str] = Field(
        None,
        description="Parameter value violating validation, if relevant to the error.",
    )

    @computed_field(alias="errorDescription")
    @property
    def error_description(self) -> str:
        """A developer-only description of the error."""
        return ERROR_DESCRIPTIONS.get(self.error_number, ERROR_DESCRIPTIONS[ErrorNumber.UNKNOWN])

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "errorNumber": 4,
                "parameterName": "fileName",
                "parameterValue": "report.pdf",
                "errorDescription": "The entity could not be found",
            }
        },
    )


class ContentFileSummary(BaseModel):
    """Descriptor of a content file, as returned when listing a container."""
    name: str = Field(
        description="Name of the file.",
        json_schema_extra={"example": "report.pdf"},
    )


@dataclass
class FileData:
    """An uploaded payload on its way to blob storage."""
    stream: BinaryIO
    content_type: Optional[str]
    length: int
    filename: Optional[str] = None
