from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# keys a light object must carry to be usable
REQUIRED_KEYS = ("state", "name", "type", "modelid", "manufacturername", "uniqueid", "swversion")


class LightState(BaseModel):
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
    mode: Optional[str] = None
    reachable: bool = True


class SoftwareUpdate(BaseModel):
    state: str = ""
    lastinstall: Optional[str] = None


class Light(BaseModel):
    id: int
    name: str
    type: str
    modelid: str
    manufacturername: str
    uniqueid: str
    swversion: str
    productname: str = ""
    swconfigid: str = ""
    productid: str = ""
    state: LightState
    swupdate: SoftwareUpdate = Field(default_factory=SoftwareUpdate)
    config: dict[str, Any] = Field(default_factory=dict)
    capabilities: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_bridge(cls, light_id: int, json: dict) -> Optional["Light"]:
        """Build a Light from the object under lights/<id>, None if it is incomplete."""
        if not all(key in json for key in REQUIRED_KEYS):
            return None
        try:
            return cls(id=light_id, **{k: v for k, v in json.items() if k != "id"})
        except ValidationError:
            return None
