"""Unit template repository."""
from __future__ import annotations

from typing import Dict

from gridbattle.data.errors import DataReferenceError, DataValidationError
from gridbattle.data.repositories.abilities_repo import AbilitiesRepository
from gridbattle.data.repositories.base import RepositoryBase
from gridbattle.domain.defs import UnitDef

VALID_SIDES = {"hero", "enemy"}
_REQUIRED = {
    "name",
    "side",
    "hp",
    "damage",
    "speed",
    "defense",
    "crit_chance",
    "crit_damage",
    "evasion",
    "accuracy",
}
_OPTIONAL = {"penetration", "lifesteal", "abilities", "tags"}
# Stats expressed as a fraction of one.
_FRACTIONS = ("crit_chance", "evasion", "accuracy", "penetration", "lifesteal")


class UnitsRepository(RepositoryBase[UnitDef]):
    """Loads hero and enemy templates; ability ids are checked when a repository is given."""

    def __init__(self, base_path=None, abilities_repo: AbilitiesRepository | None = None) -> None:
        super().__init__("units.json", base_path)
        self._abilities_repo = abilities_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, UnitDef]:
        units: Dict[str, UnitDef] = {}
        for raw_id, payload in raw.items():
            context = f"unit '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(data, required=_REQUIRED, optional=_OPTIONAL, context=context)

            side = self._require_str(data["side"], f"{context} side")
            if side not in VALID_SIDES:
                raise DataValidationError(f"{context} side must be one of {sorted(VALID_SIDES)}.")

            numbers = {
                key: self._require_number(data[key], f"{context} {key}", minimum=0)
                for key in ("hp", "damage", "speed", "defense", "crit_damage")
            }
            if numbers["hp"] <= 0:
                raise DataValidationError(f"{context} hp must be positive.")
            for key in _FRACTIONS:
                numbers[key] = self._require_fraction(data.get(key, 0.0), f"{context} {key}")

            ability_ids = tuple(self._require_str_list(data.get("abilities", []), f"{context} abilities"))
            self._check_abilities(ability_ids, context)

            units[raw_id] = UnitDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                side=side,  # type: ignore[arg-type]
                ability_ids=ability_ids,
                tags=tuple(self._require_str_list(data.get("tags", []), f"{context} tags")),
                **numbers,
            )
        return units

    def _require_fraction(self, value: object, context: str) -> float:
        number = self._require_number(value, context, minimum=0)
        if number > 1:
            raise DataValidationError(f"{context} must be between 0 and 1.")
        return number

    def _check_abilities(self, ability_ids: tuple[str, ...], context: str) -> None:
        if self._abilities_repo is None:
            return
        for ability_id in ability_ids:
            if not self._abilities_repo.has(ability_id):
                raise DataReferenceError(f"{context} references unknown ability '{ability_id}'.")

    def by_side(self, side: str) -> list[UnitDef]:
        """Return templates for one side, sorted by id."""
        return [unit for unit in self.all() if unit.side == side]
