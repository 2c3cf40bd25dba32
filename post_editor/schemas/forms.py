from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3306


class FormElement(BaseModel):
    name: str
    type: Literal["text", "number", "password", "long_text", "hidden"]
    placeholder: Optional[str] = None
    default: Optional[str | int] = None
    required: bool = False
    value: Optional[str] = None


class BackendParams(BaseModel):
    """Connection parameters accepted by the post editor backend."""

    model_config = ConfigDict(extra="forbid")

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str
    password: str = ""

    @field_validator("host", mode="before")
    @classmethod
    def _default_host(cls, value):
        return value or DEFAULT_HOST

    @field_validator("port", mode="before")
    @classmethod
    def _default_port(cls, value):
        return value or DEFAULT_PORT


class FieldValue(BaseModel):
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _scalar_to_text(cls, value):
        # Any JSON scalar is stored as text; arrays and objects are rejected.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class SavePayload(BaseModel):
    title: FieldValue = Field(default_factory=FieldValue)
    description: FieldValue = Field(default_factory=FieldValue)
    content: FieldValue = Field(default_factory=FieldValue)
