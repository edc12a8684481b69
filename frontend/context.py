from dataclasses import dataclass
from typing import Any, Dict

from frontend.data.api_client import ApiClient


@dataclass
class AppContext:
    client: ApiClient
    profile: Dict[str, Any]

    @property
    def display_name(self):
        return self.profile.get("name") or "You"
