"""Avatar — the player's cosmetic profile.

Cosmetics carry no game rules.  ``parse_avatar`` is the only way raw
request data becomes an Avatar: it checks every field and reports all
problems at once.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from microfarm.errors import ValidationError


class BodyType(Enum):
    SLIM = "slim"
    AVERAGE = "average"
    STURDY = "sturdy"


class HairStyle(Enum):
    SHORT = "short"
    LONG = "long"
    CURLY = "curly"
    BALD = "bald"


@dataclass(frozen=True)
class Avatar:
    """Validated cosmetic attributes.

    Attributes:
        name: Display name, trimmed and non-empty.
        body_type: Body shape.
        hair_style: Hair cut.
        hair_color: Any non-empty colour string, e.g. ``"#8B4513"``.
        skin_tone: Any non-empty colour string.
    """

    name: str
    body_type: BodyType
    hair_style: HairStyle
    hair_color: str
    skin_tone: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Player:
    """A player record.

    Attributes:
        id: Opaque session id, shared with the player's game session.
        avatar: Cosmetic profile.
        created_at: When the player was created.
        last_active: Last time any request touched this player.
    """

    id: str
    avatar: Avatar
    created_at: datetime = field(default_factory=_utcnow)
    last_active: datetime = field(default_factory=_utcnow)

    def touch(self, now: datetime | None = None) -> None:
        """Record activity."""
        self.last_active = now or _utcnow()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.avatar.name,
            "bodyType": self.avatar.body_type.value,
            "hairStyle": self.avatar.hair_style.value,
            "hairColor": self.avatar.hair_color,
            "skinTone": self.avatar.skin_tone,
            "createdAt": self.created_at.isoformat(),
            "lastActive": self.last_active.isoformat(),
        }


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def parse_avatar(data: Mapping[str, Any]) -> Avatar:
    """Validate raw cosmetics and build an Avatar.

    Accepts the client's camelCase keys (``bodyType``, ``hairStyle``,
    ``hairColor``, ``skinTone``).

    Raises:
        ValidationError: Listing every invalid field.
    """
    errors: list[str] = []

    name = data.get("name")
    if not _non_empty_str(name):
        errors.append("Name is required and must be a non-empty string")

    body_values = {b.value for b in BodyType}
    body_type = data.get("bodyType")
    if not (isinstance(body_type, str) and body_type in body_values):
        errors.append("Valid body type is required")

    hair_values = {h.value for h in HairStyle}
    hair_style = data.get("hairStyle")
    if not (isinstance(hair_style, str) and hair_style in hair_values):
        errors.append("Valid hair style is required")

    hair_color = data.get("hairColor")
    if not _non_empty_str(hair_color):
        errors.append("Valid hair color is required")

    skin_tone = data.get("skinTone")
    if not _non_empty_str(skin_tone):
        errors.append("Valid skin tone is required")

    if errors:
        raise ValidationError("Invalid player data", errors)

    return Avatar(
        name=name.strip(),
        body_type=BodyType(body_type),
        hair_style=HairStyle(hair_style),
        hair_color=hair_color,
        skin_tone=skin_tone,
    )
