"""
Envelope: one incoming message before variant resolution.
"""

from typing import Any, Optional

from pydantic import BaseModel


class Envelope(BaseModel):
    discriminator: str
    body: dict[str, Any]

    model_config = {"frozen": True}

    @property
    def serial_number(self) -> Optional[Any]:
        return self.body.get("serial_number")

    @property
    def hub_sn(self) -> Optional[Any]:
        return self.body.get("hub_sn")
