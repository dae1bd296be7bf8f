import logging
from typing import Callable, Optional

from pydantic import BaseModel

from huelink.api.bridge import HueBridge
from huelink.api.messages import Request
from huelink.services.device_service import DeviceAdapter, DeviceService
from huelink.services.group_service import GroupAdapter
from huelink.services.light_service import LightAdapter

logger = logging.getLogger(__name__)


class HueRepository:
    """Discovers lights and groups and keeps the result for lookups."""

    def __init__(self, bridge: HueBridge):
        self.bridge = bridge
        self._lights: dict[int, DeviceService] = {}
        self._groups: dict[int, DeviceService] = {}

    @property
    def lights(self) -> list[DeviceService]:
        return list(self._lights.values())

    @property
    def groups(self) -> list[DeviceService]:
        return list(self._groups.values())

    def discover_lights(self) -> list[DeviceService]:
        self._lights = self._discover("lights", LightAdapter)
        return self.lights

    def discover_groups(self) -> list[DeviceService]:
        self._groups = self._discover("groups", GroupAdapter)
        return self.groups

    def _discover(self, resource: str,
                  make_adapter: Callable[[int], DeviceAdapter]) -> dict[int, DeviceService]:
        reply = self.bridge.send_request(Request.get(resource))
        if not reply.valid:
            logger.warning("Discovery of %s failed\n%s", resource, reply)
            return {}

        found: dict[int, DeviceService] = {}
        for key, json in sorted(self._numbered(reply.data)):
            adapter = make_adapter(key)
            model: Optional[BaseModel] = adapter.parse(json)
            if model is None:
                logger.info("Skipping %s/%s: incomplete object", resource, key)
                continue
            found[key] = DeviceService(self.bridge, adapter, model)

        logger.debug("Discovered %d %s", len(found), resource)
        return found

    @staticmethod
    def _numbered(data: dict):
        for key, json in data.items():
            if key.isdigit() and isinstance(json, dict):
                yield int(key), json

    # =====================
    # Lookups
    def light(self, light_id: int) -> Optional[DeviceService]:
        return self._lights.get(int(light_id))

    def group(self, group_id: int) -> Optional[DeviceService]:
        return self._groups.get(int(group_id))

    def find_light(self, name: str) -> Optional[DeviceService]:
        return self._find(self._lights.values(), name)

    def find_group(self, name: str) -> Optional[DeviceService]:
        return self._find(self._groups.values(), name)

    @staticmethod
    def _find(devices, name: str) -> Optional[DeviceService]:
        needle = name.lower().strip()
        for device in devices:
            if device.name.lower().strip() == needle:
                return device
        return None

    def group_lights(self, group: DeviceService) -> list[DeviceService]:
        """The discovered lights that belong to `group`."""
        return [self._lights[light_id] for light_id in group.model.light_ids
                if light_id in self._lights]
