"""
Data models for the Incubator Bot.
Inventory entities are rebuilt from every snapshot; only IncubatorUsage
outlives a run.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class IncubatorKind(Enum):
    UNLIMITED = "ITEM_INCUBATOR_BASIC_UNLIMITED"
    LIMITED = "ITEM_INCUBATOR_BASIC"


@dataclass
class PlayerStats:
    km_walked: float
    level: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerStats":
        return cls(
            km_walked=float(data.get("km_walked", 0.0)),
            level=int(data.get("level", 1)),
        )


@dataclass
class Incubator:
    """Egg incubator. Idle while pokemon_id is 0."""
    id: str
    item_id: IncubatorKind
    pokemon_id: int = 0
    uses_remaining: int = 0
    start_km_walked: float = 0.0
    target_km_walked: float = 0.0

    @property
    def is_unlimited(self) -> bool:
        return self.item_id == IncubatorKind.UNLIMITED

    @property
    def is_idle(self) -> bool:
        return self.pokemon_id == 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Incubator":
        return cls(
            id=str(data["id"]),
            item_id=IncubatorKind(data["item_id"]),
            pokemon_id=int(data.get("pokemon_id") or 0),
            uses_remaining=int(data.get("uses_remaining", 0)),
            start_km_walked=float(data.get("start_km_walked", 0.0)),
            target_km_walked=float(data.get("target_km_walked", 0.0)),
        )


@dataclass
class Egg:
    """Pending egg. Unused while egg_incubator_id is empty."""
    id: int
    egg_km_walked_target: float
    egg_km_walked_start: float = 0.0
    egg_incubator_id: str = ""

    @property
    def km_remaining(self) -> float:
        return self.egg_km_walked_target - self.egg_km_walked_start

    @property
    def is_unused(self) -> bool:
        return not self.egg_incubator_id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Egg":
        return cls(
            id=int(data["id"]),
            egg_km_walked_target=float(data["egg_km_walked_target"]),
            egg_km_walked_start=float(data.get("egg_km_walked_start", 0.0)),
            egg_incubator_id=data.get("egg_incubator_id") or "",
        )


@dataclass
class Pokemon:
    """Any tracked pokemon, including eggs that have not hatched yet."""
    id: int
    pokemon_id: int = 0                     # Species
    is_egg: bool = False
    cp: int = 0
    individual_attack: int = 0
    individual_defense: int = 0
    individual_stamina: int = 0
    cp_multiplier: float = 0.0
    additional_cp_multiplier: float = 0.0
    base_attack: int = 0
    base_defense: int = 0
    base_stamina: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pokemon":
        return cls(
            id=int(data["id"]),
            pokemon_id=int(data.get("pokemon_id", 0)),
            is_egg=bool(data.get("is_egg", False)),
            cp=int(data.get("cp", 0)),
            individual_attack=int(data.get("individual_attack", 0)),
            individual_defense=int(data.get("individual_defense", 0)),
            individual_stamina=int(data.get("individual_stamina", 0)),
            cp_multiplier=float(data.get("cp_multiplier", 0.0)),
            additional_cp_multiplier=float(data.get("additional_cp_multiplier", 0.0)),
            base_attack=int(data.get("base_attack", 0)),
            base_defense=int(data.get("base_defense", 0)),
            base_stamina=int(data.get("base_stamina", 0)),
        )


@dataclass(frozen=True)
class IncubatorUsage:
    """Remembered incubator → egg assignment."""
    incubator_id: str
    pokemon_id: int


@dataclass
class UseIncubatorResponse:
    target_km_walked: float


# ==================== Events ====================

@dataclass
class EggHatchedEvent:
    id: int
    pokemon_id: int
    level: float
    cp: int
    max_cp: int
    perfection: float


@dataclass
class EggIncubatorStatusEvent:
    incubator_id: str
    pokemon_id: int
    km_to_walk: float
    km_remaining: float
    was_added_now: bool = False
