"""
Callback models exchanged with the authentication tree engine
"""
from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class MessageType(IntEnum):
    """Message types shared by text output and confirmation callbacks"""
    INFORMATION = 0
    WARNING = 1
    ERROR = 2


class Callback(BaseModel):
    """Base class for callbacks sent to the user's client"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert callback to dictionary"""
        return {"type": type(self).__name__, **self.model_dump(mode="json")}


class ScriptTextOutputCallback(Callback):
    """Asks the client to execute a script"""
    script: str


class TextOutputCallback(Callback):
    """Displays a line of text"""
    message: str
    message_type: MessageType = MessageType.INFORMATION


class ConfirmationCallback(Callback):
    """
    Offers a set of buttons to the user

    The tree engine fills in ``selected_index`` when the user's response
    comes back on the next round trip.
    """
    options: List[str] = Field(..., min_length=1)
    default_option: int = 0
    message_type: MessageType = MessageType.INFORMATION
    selected_index: Optional[int] = None

    @model_validator(mode="after")
    def check_default_option(self) -> "ConfirmationCallback":
        if not 0 <= self.default_option < len(self.options):
            raise ValueError(
                f"default_option {self.default_option} is out of range for {len(self.options)} options"
            )
        return self
