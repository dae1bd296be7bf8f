from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

REQUIRED_KEYS = ("name", "lights", "type", "action")


class GroupAction(BaseModel):
    model_config = ConfigDict(extra="allow")

    on: bool = False
    bri: Optional[int] = None
    hue: Optional[int] = None
    sat: Optional[int] = None
    ct: Optional[int] = None
    xy: Optional[tuple[float, float]] = None
    alert: Optional[str] = None
    effect: Optional[str] = None
    colormode: Optional[str] = None


class GroupState(BaseModel):
    all_on: bool = False
    any_on: bool = False


class Group(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    type: str
    lights: list[str] = Field(default_factory=list)
    sensors: list[str] = Field(default_factory=list)
    group_class: str = Field("", alias="class")
    recycle: bool = False
    state: GroupState = Field(default_factory=GroupState)
    action: GroupAction

    @property
    def light_ids(self) -> list[int]:
        return [int(light_id) for light_id in self.lights if light_id.isdigit()]

    @classmethod
    def from_bridge(cls, group_id: int, json: dict) -> Optional["Group"]:
        if not all(key in json for key in REQUIRED_KEYS):
            return None
        try:
            return cls(id=group_id, **{k: v for k, v in json.items() if k != "id"})
        except ValidationError:
            return None
