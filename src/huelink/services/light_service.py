from dataclasses import dataclass
from typing import Any, Optional

from huelink.api.messages import Request, SenderCategory
from huelink.commands.base import build_command
from huelink.models.light import Light
from huelink.services.device_service import plain


@dataclass(frozen=True)
class LightAdapter:
    device_id: int
    category: SenderCategory = SenderCategory.LIGHT

    def build_mutation_request(self, field: str, value: Any) -> Request:
        command = build_command(field, value)
        return Request.put(f"lights/{self.device_id}/state", command.body())

    def build_sync_request(self) -> Request:
        return Request.get(f"lights/{self.device_id}")

    def apply_local_update(self, model: Light, field: str, value: Any) -> Light:
        state = model.state.model_copy(update={field: plain(value)})
        return model.model_copy(update={"state": state})

    def parse(self, json: dict) -> Optional[Light]:
        return Light.from_bridge(self.device_id, json)
