from dataclasses import dataclass
from typing import Any, Optional

from huelink.api.messages import Request, SenderCategory
from huelink.commands.base import build_command
from huelink.models.group import Group
from huelink.services.device_service import plain


@dataclass(frozen=True)
class GroupAdapter:
    device_id: int
    category: SenderCategory = SenderCategory.GROUP

    def build_mutation_request(self, field: str, value: Any) -> Request:
        command = build_command(field, value)
        return Request.put(f"groups/{self.device_id}/action", command.body())

    def build_sync_request(self) -> Request:
        return Request.get(f"groups/{self.device_id}")

    def apply_local_update(self, model: Group, field: str, value: Any) -> Group:
        action = model.action.model_copy(update={field: plain(value)})
        update = {"action": action}
        if field == "on":
            # switching the group action switches every light in it
            update["state"] = model.state.model_copy(update={"all_on": value, "any_on": value})
        return model.model_copy(update=update)

    def parse(self, json: dict) -> Optional[Group]:
        return Group.from_bridge(self.device_id, json)
