"""Completion coordinates.

A completion carries up to three positions that must not be conflated:

- ``yard``: where a picked skip ends up. Always the configured yard
  coordinates, never measured.
- ``site``: where a dropped skip now sits. Approximated by the driver's GPS
  at completion time.
- ``driver_position``: where the driver stood when tapping complete,
  recorded for every completion with a fix, whatever the action.

Each role appears at most once. ``TaggedLocation`` lists are flattened to
the ``pick_*``/``drop_*``/bare ``lat``/``lng`` columns for storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

PICK_ACTIONS = frozenset({"pick", "pick_drop"})
DROP_ACTIONS = frozenset({"drop", "pick_drop"})


class LocationRole(str, Enum):
    YARD = "yard"
    SITE = "site"
    DRIVER_POSITION = "driver_position"


@dataclass(frozen=True)
class TaggedLocation:
    role: LocationRole
    lat: float
    lng: float
    accuracy_m: float | None = None

    def maps_url(self) -> str:
        return f"https://www.google.com/maps?q={self.lat},{self.lng}"

    def as_text(self) -> str:
        return f"{self.lat:.6f}, {self.lng:.6f}"


def involves_pick(action: str | None) -> bool:
    return action in PICK_ACTIONS


def involves_drop(action: str | None) -> bool:
    return action in DROP_ACTIONS


def resolve_locations(
    action: str,
    yard_lat: float | None,
    yard_lng: float | None,
    lat: float | None,
    lng: float | None,
    accuracy_m: float | None = None,
) -> list[TaggedLocation]:
    """Apply the pick/drop policy to a completion.

    Picks get the yard, drops get the driver's fix, and the fix is kept as the
    driver position regardless of action. Missing inputs leave the
    corresponding role out.
    """
    locations: list[TaggedLocation] = []
    has_fix = lat is not None and lng is not None

    if involves_pick(action) and yard_lat is not None and yard_lng is not None:
        locations.append(TaggedLocation(LocationRole.YARD, yard_lat, yard_lng))
    if involves_drop(action) and has_fix:
        locations.append(TaggedLocation(LocationRole.SITE, lat, lng))
    if has_fix:
        locations.append(
            TaggedLocation(LocationRole.DRIVER_POSITION, lat, lng, accuracy_m)
        )

    check_unique_roles(locations)
    return locations


def check_unique_roles(locations: list[TaggedLocation]) -> None:
    seen: set[LocationRole] = set()
    for loc in locations:
        if loc.role in seen:
            raise ValueError(f"Duplicate location role: {loc.role.value}")
        seen.add(loc.role)


def locations_to_columns(locations: list[TaggedLocation]) -> dict[str, float | None]:
    """Flatten tagged locations to completion column values."""
    check_unique_roles(locations)
    cols: dict[str, float | None] = {
        "pick_lat": None, "pick_lng": None,
        "drop_lat": None, "drop_lng": None,
        "lat": None, "lng": None, "accuracy_m": None,
    }
    for loc in locations:
        if loc.role is LocationRole.YARD:
            cols["pick_lat"], cols["pick_lng"] = loc.lat, loc.lng
        elif loc.role is LocationRole.SITE:
            cols["drop_lat"], cols["drop_lng"] = loc.lat, loc.lng
        else:
            cols["lat"], cols["lng"] = loc.lat, loc.lng
            cols["accuracy_m"] = loc.accuracy_m
    return cols


def locations_from_columns(record: Any) -> list[TaggedLocation]:
    """Rebuild tagged locations from anything with the completion columns."""
    locations = []
    if record.pick_lat is not None and record.pick_lng is not None:
        locations.append(TaggedLocation(LocationRole.YARD, record.pick_lat, record.pick_lng))
    if record.drop_lat is not None and record.drop_lng is not None:
        locations.append(TaggedLocation(LocationRole.SITE, record.drop_lat, record.drop_lng))
    if record.lat is not None and record.lng is not None:
        locations.append(
            TaggedLocation(LocationRole.DRIVER_POSITION, record.lat, record.lng, record.accuracy_m)
        )
    return locations


def location_for(locations: list[TaggedLocation], role: LocationRole) -> TaggedLocation | None:
    for loc in locations:
        if loc.role is role:
            return loc
    return None
