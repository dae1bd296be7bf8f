import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from pydantic import BaseModel

from huelink.api.bridge import HueBridge
from huelink.api.messages import Reply, Request, SenderCategory
from huelink.commands.base import Alert, Effect
from huelink.utils.color import srgb_to_xy

logger = logging.getLogger(__name__)

# callback(device, event, value); event is the changed field or "synchronized"
Listener = Callable[["DeviceService", str, Any], None]

SYNCHRONIZED = "synchronized"


class DeviceAdapter(Protocol):
    """What DeviceService needs to know about one kind of device."""

    category: SenderCategory
    device_id: int

    def build_mutation_request(self, field: str, value: Any) -> Request: ...

    def build_sync_request(self) -> Request: ...

    def apply_local_update(self, model: BaseModel, field: str, value: Any) -> BaseModel: ...

    def parse(self, json: dict) -> Optional[BaseModel]: ...


def plain(value: Any) -> Any:
    """Value as it is stored in the mirrored models."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return tuple(value)
    return value


def _clamp(value, low, high):
    return max(low, min(value, high))


class DeviceService:
    """
    A light or group on the bridge together with a local copy of its state.

    Every setter sends one PUT request and returns whether the bridge accepted
    it. The local copy only changes when it did; listeners are told about the
    change afterwards.
    """

    def __init__(self, bridge: HueBridge, adapter: DeviceAdapter, model: BaseModel):
        self.bridge = bridge
        self.adapter = adapter
        self._model = model
        self._listeners: list[Listener] = []
        self.last_reply: Optional[Reply] = None

    def __repr__(self):
        return f"{type(self).__name__}({self.category.value} {self.id}: {self.name!r})"

    @property
    def id(self) -> int:
        return self.adapter.device_id

    @property
    def name(self) -> str:
        return getattr(self._model, "name", "")

    @property
    def category(self) -> SenderCategory:
        return self.adapter.category

    @property
    def model(self) -> BaseModel:
        return self._model

    # =====================
    # Listeners
    def add_listener(self, callback: Listener) -> bool:
        if callback in self._listeners:
            return False
        self._listeners.append(callback)
        return True

    def remove_listener(self, callback: Listener) -> bool:
        if callback not in self._listeners:
            return False
        self._listeners.remove(callback)
        return True

    def _notify(self, event: str, value: Any) -> None:
        for callback in list(self._listeners):
            callback(self, event, value)

    # =====================
    # Commands
    def turn_on(self, on: bool = True) -> bool:
        return self._mutate("on", bool(on))

    def turn_off(self, off: bool = True) -> bool:
        return self._mutate("on", not off)

    def set_hue(self, hue: int) -> bool:
        return self._mutate("hue", _clamp(int(hue), 0, 65535))

    def set_saturation(self, saturation: int) -> bool:
        return self._mutate("sat", _clamp(int(saturation), 0, 254))

    def set_brightness(self, brightness: int) -> bool:
        return self._mutate("bri", _clamp(int(brightness), 1, 254))

    def set_color_temp(self, mirek: int) -> bool:
        return self._mutate("ct", _clamp(int(mirek), 153, 500))

    def set_xy(self, x: float, y: float) -> bool:
        return self._mutate("xy", (_clamp(float(x), 0.0, 1.0), _clamp(float(y), 0.0, 1.0)))

    def set_rgb(self, r: int, g: int, b: int) -> bool:
        return self.set_xy(*srgb_to_xy(r, g, b))

    def set_alert(self, alert: Alert) -> bool:
        return self._mutate("alert", Alert(alert))

    def set_effect(self, effect: Effect) -> bool:
        return self._mutate("effect", Effect(effect))

    def _mutate(self, field: str, value: Any) -> bool:
        request = self.adapter.build_mutation_request(field, value)
        if not self._send(request):
            return False

        self._model = self.adapter.apply_local_update(self._model, field, value)
        self._notify(field, plain(value))
        return True

    def synchronize(self) -> bool:
        """Reload the device from the bridge and replace the local copy."""
        if not self._send(self.adapter.build_sync_request()):
            return False

        model = self.adapter.parse(self.last_reply.data)
        if model is None:
            logger.warning("Bridge returned an incomplete object for %r", self)
            return False

        self._model = model
        self._notify(SYNCHRONIZED, model)
        return True

    def _send(self, request: Request) -> bool:
        reply = self.bridge.send_request(request, self.adapter.category)
        self.last_reply = reply
        if reply.valid:
            return True

        logger.warning("%s %s failed for %r\n%s", request.method.value, request.path, self, reply)
        return False
