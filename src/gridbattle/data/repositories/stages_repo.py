"""Stages repository."""
from __future__ import annotations

from typing import Dict

from gridbattle.data.errors import DataReferenceError, DataValidationError
from gridbattle.data.repositories.base import RepositoryBase
from gridbattle.data.repositories.units_repo import UnitsRepository
from gridbattle.domain.defs import StageDef


class StagesRepository(RepositoryBase[StageDef]):
    """Loads stages as ordered lists of enemy waves."""

    def __init__(self, base_path=None, units_repo: UnitsRepository | None = None) -> None:
        super().__init__("stages.json", base_path)
        self._units_repo = units_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, StageDef]:
        stages: Dict[str, StageDef] = {}
        for raw_id, payload in raw.items():
            context = f"stage '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(data, required={"name", "level", "waves"}, context=context)

            raw_waves = data["waves"]
            if not isinstance(raw_waves, list) or not raw_waves:
                raise DataValidationError(f"{context} waves must be a non-empty list.")
            waves = []
            for index, entry in enumerate(raw_waves, start=1):
                unit_ids = self._require_str_list(entry, f"{context} wave {index}")
                if not unit_ids:
                    raise DataValidationError(f"{context} wave {index} must not be empty.")
                self._check_units(unit_ids, f"{context} wave {index}")
                waves.append(tuple(unit_ids))

            stages[raw_id] = StageDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                level=self._require_int(data["level"], f"{context} level", minimum=1),
                waves=tuple(waves),
            )
        return stages

    def _check_units(self, unit_ids: list[str], context: str) -> None:
        if self._units_repo is None:
            return
        for unit_id in unit_ids:
            if not self._units_repo.has(unit_id):
                raise DataReferenceError(f"{context} references unknown unit '{unit_id}'.")
            if self._units_repo.get(unit_id).side != "enemy":
                raise DataValidationError(f"{context} lists hero template '{unit_id}'.")
