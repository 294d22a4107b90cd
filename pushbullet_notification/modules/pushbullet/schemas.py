"""
modules/pushbullet/schemas.py — Pydantic schemas for the Pushbullet channel.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict


class PushLink(BaseModel):
    """Body of POST /v2/pushes for a link push. Field order is the wire order."""
    type: Literal["link"] = "link"
    body: str
    url: str
    email: str


class PushbulletErrorBody(BaseModel):
    """Error envelope returned by the API: {"error": {"type", "message", "cat"}}."""
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    message: Optional[str] = None


class PreferenceDefinition(BaseModel):
    """One row of the host's notification preference table."""
    group: str
    name: str
    description: str

    @property
    def suffix(self) -> Optional[str]:
        prefix, sep, suffix = self.name.partition(".")
        if not sep or not prefix or not suffix:
            return None
        return suffix
