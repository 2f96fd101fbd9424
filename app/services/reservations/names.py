import re
from typing import Dict, Optional

_IGNORED = re.compile(r"[\s.&-]")

def normalize_room_name(name: Optional[str]) -> str:
    """Canonical key for a room name: lower case, no whitespace, '.', '&' or '-'.

    "Lab A.1", "lab a1" and "LAB-A 1" all map to "laba1". Empty or missing
    names map to "".
    """
    if not name:
        return ""
    return _IGNORED.sub("", name.lower())

class RoomNameMatcher:
    """Matches lecture room names to rooms, honouring an optional alias table."""

    def __init__(self, aliases: Optional[Dict[str, str]] = None):
        self.aliases = {
            normalize_room_name(alias): normalize_room_name(canonical)
            for alias, canonical in (aliases or {}).items()
        }

    def key(self, name: Optional[str]) -> str:
        normalized = normalize_room_name(name)
        return self.aliases.get(normalized, normalized)
