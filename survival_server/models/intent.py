# survival_server/models/intent.py
"""Inbound player intent messages.

Every field defaults to an inert value so that a partial message never moves
or fires anything it did not ask for.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class KeyState(BaseModel):
    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False


class JoystickState(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0


class MouseState(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    # No aim point unless the client sends one
    x: Optional[float] = None
    y: Optional[float] = None
    down: bool = False
    rightDown: bool = False

    @property
    def has_aim(self) -> bool:
        return self.x is not None and self.y is not None


class Intent(BaseModel):
    """A player's latest input for the coming tick."""

    model_config = ConfigDict(allow_inf_nan=False)

    keys: KeyState = Field(default_factory=KeyState)
    joystick: JoystickState = Field(default_factory=JoystickState)
    mouse: MouseState = Field(default_factory=MouseState)
    lastShot: float = 0.0


def parse_intent(data: Any) -> Intent:
    """Build an Intent from a raw client payload.

    Payloads that fail validation are replaced by the inert intent.
    """
    if not isinstance(data, dict):
        logger.warning(f"Rejected intent payload of type {type(data).__name__}")
        return Intent()
    # Explicit nulls are treated like missing fields
    cleaned = {key: value for key, value in data.items() if value is not None}
    try:
        return Intent.model_validate(cleaned)
    except ValidationError as e:
        logger.warning(f"Rejected malformed intent: {e.error_count()} error(s)")
        return Intent()
