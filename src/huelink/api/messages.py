from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

RULE = "." * 66


class Method(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"


class SenderCategory(str, Enum):
    """Who sent a request. Selects the cooldown the bridge applies afterwards."""
    LIGHT = "light"
    GROUP = "group"
    OTHER = "other"


class ErrorType(IntEnum):
    # https://developers.meethue.com/develop/hue-api/error-messages/
    NONE = -1
    UNAUTHORIZED_USER = 1
    INVALID_JSON = 2
    RESOURCE_NOT_AVAILABLE = 3
    METHOD_NOT_AVAILABLE = 4
    MISSING_PARAMETERS = 5
    PARAMETER_NOT_AVAILABLE = 6
    INVALID_VALUE = 7
    READ_ONLY_PARAMETER = 8
    LINK_BUTTON_NOT_PRESSED = 101
    DEVICE_OFF = 201
    INTERNAL_ERROR = 901


class ConnectionStatus(Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"
    JSON_ERROR = "json_error"
    HTTP_ERROR = "http_error"
    UNKNOWN = "unknown"


class HueError(BaseModel):
    """
    An error object returned by the bridge, e.g.
    {"type": 101, "address": "", "description": "link button not pressed"}.
    type == -1 means "no error".
    """
    model_config = ConfigDict(frozen=True)

    type: int = ErrorType.NONE
    address: str = ""
    description: str = ""

    @property
    def is_error(self) -> bool:
        return self.type != ErrorType.NONE

    @classmethod
    def from_json(cls, obj: dict) -> "HueError":
        raw_type = obj.get("type", 0)
        return cls(
            type=raw_type if isinstance(raw_type, int) else 0,
            address=str(obj.get("address", "")),
            description=str(obj.get("description", "")),
        )

    def __str__(self) -> str:
        return (
            "ERROR:\n"
            f"{RULE}\n"
            f"Type:\t\t{self.type}\n"
            f"Address:\t{self.address}\n"
            f"Description:\t{self.description}\n"
            f"{RULE}\n"
        )


class Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = ""
    body: dict[str, Any] = Field(default_factory=dict)
    method: Method = Method.GET

    @classmethod
    def get(cls, path: str) -> "Request":
        return cls(path=path, method=Method.GET)

    @classmethod
    def put(cls, path: str, body: dict) -> "Request":
        return cls(path=path, body=body, method=Method.PUT)

    @classmethod
    def post(cls, body: dict) -> "Request":
        # POST only targets the provisioning endpoint, which has no path
        return cls(path="", body=body, method=Method.POST)


class Reply(BaseModel):
    """
    Result of HueBridge.send_request().

    For GET requests `data` is the raw JSON object. For PUT/POST requests, and
    for any request answered with an error, `data` is the object found inside
    the "success"/"error" wrapper, because the bridge wraps those in arrays.
    A 200 status does not mean success; use `valid`.
    """
    model_config = ConfigDict(frozen=True)

    valid: bool = False
    timed_out: bool = False
    http_status: int = 0
    error: HueError = Field(default_factory=HueError)
    data: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.valid and (self.timed_out or self.error.is_error):
            raise ValueError("a valid reply can neither time out nor carry an error")
        return self

    @property
    def contains_error(self) -> bool:
        return self.error.is_error

    def __str__(self) -> str:
        text = (
            "Reply:\n"
            f"{RULE}\n"
            f"Is valid:\t\t{self.valid}\n"
            f"Timed out:\t\t{self.timed_out}\n"
            f"HTTP status code:\t{self.http_status}\n"
            f"Contains error:\t\t{self.contains_error}\n"
        )
        if self.contains_error:
            text += str(self.error)
        return text + f"{RULE}\n"
