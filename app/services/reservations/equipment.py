from typing import Iterable, List

from app.schemas.room import Equipment, EquipmentOptions

def equipment_options(room_id: str, equipment: Iterable[Equipment]) -> EquipmentOptions:
    """Equipment offered with a room: its own items first, then general ones.

    Mandatory items start out selected.
    """
    usable = [eq for eq in equipment if eq.is_available]
    options = [eq for eq in usable if eq.rooms_id == room_id]
    options += [eq for eq in usable if eq.rooms_id is None]
    return EquipmentOptions(
        room_id=room_id,
        equipment=options,
        selected=[eq.id for eq in options if eq.is_mandatory],
    )

def with_mandatory(requested: Iterable[str], options: EquipmentOptions) -> List[str]:
    """``requested`` plus any mandatory item the user unticked, order preserved."""
    chosen = list(dict.fromkeys(requested))
    for eq_id in options.selected:
        if eq_id not in chosen:
            chosen.append(eq_id)
    return chosen
