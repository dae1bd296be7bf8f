from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class Alert(str, Enum):
    NONE = "none"
    SELECT = "select"      # breathe once
    LSELECT = "lselect"    # breathe for 15 seconds


class Effect(str, Enum):
    NONE = "none"
    COLORLOOP = "colorloop"


class Command(BaseModel):
    """A PUT body that changes exactly one field of a light state / group action."""
    model_config = ConfigDict(frozen=True)

    @property
    def field(self) -> str:
        return next(iter(type(self).model_fields))

    @property
    def value(self) -> Any:
        return getattr(self, self.field)

    def body(self) -> dict:
        return self.model_dump(mode="json")


class OnCommand(Command):
    on: bool


class HueCommand(Command):
    hue: int = Field(..., ge=0, le=65535)


class SaturationCommand(Command):
    sat: int = Field(..., ge=0, le=254)


class BrightnessCommand(Command):
    bri: int = Field(..., ge=1, le=254)


class ColorTempCommand(Command):
    # mirek
    ct: int = Field(..., ge=153, le=500)


Unit = Annotated[float, Field(ge=0.0, le=1.0)]


class XYCommand(Command):
    xy: tuple[Unit, Unit]


class AlertCommand(Command):
    alert: Alert


class EffectCommand(Command):
    effect: Effect


COMMANDS: dict[str, type[Command]] = {
    "on": OnCommand,
    "hue": HueCommand,
    "sat": SaturationCommand,
    "bri": BrightnessCommand,
    "ct": ColorTempCommand,
    "xy": XYCommand,
    "alert": AlertCommand,
    "effect": EffectCommand,
}


def build_command(field: str, value: Any) -> Command:
    try:
        command_cls = COMMANDS[field]
    except KeyError:
        raise ValueError(f"'{field}' is not a mutable field!\n{sorted(COMMANDS)=}") from None
    return command_cls(**{field: value})
