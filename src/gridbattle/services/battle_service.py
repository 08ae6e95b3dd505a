"""Battle service wiring definitions to the combat engine."""
from __future__ import annotations

import logging
from typing import List, Sequence, Set

from gridbattle.core.config import DEFAULT_CONFIG, BattleConfig
from gridbattle.core.rng import RNG
from gridbattle.data.repositories import AbilitiesRepository, StagesRepository, UnitsRepository
from gridbattle.domain.battle_models import BattleState
from gridbattle.domain.defs import StageDef
from gridbattle.domain.entities import UnitInstance
from gridbattle.services.combat import BattleEngine
from gridbattle.services.errors import FactoryError
from gridbattle.services.factories import create_unit_instance

logger = logging.getLogger(__name__)


class BattleService:
    """Builds rosters from definitions and runs stages through the engine."""

    def __init__(
        self,
        units_repo: UnitsRepository,
        abilities_repo: AbilitiesRepository,
        stages_repo: StagesRepository,
        config: BattleConfig | None = None,
    ) -> None:
        self._units_repo = units_repo
        self._abilities_repo = abilities_repo
        self._stages_repo = stages_repo
        self._config = config or DEFAULT_CONFIG
        self._issued_ids: Set[str] = set()

    @property
    def config(self) -> BattleConfig:
        return self._config

    # -----------------------
    # Rosters
    # -----------------------
    def get_stage(self, stage_id: str) -> StageDef:
        try:
            return self._stages_repo.get(stage_id)
        except KeyError as exc:
            raise FactoryError(f"Stage '{stage_id}' not found.") from exc

    def hero_template_ids(self) -> List[str]:
        return [unit.id for unit in self._units_repo.by_side("hero")]

    def create_heroes(self, template_ids: Sequence[str], rng: RNG) -> List[UnitInstance]:
        heroes: List[UnitInstance] = []
        for template_id in template_ids:
            if self._units_repo.has(template_id) and self._units_repo.get(template_id).side != "hero":
                raise FactoryError(f"Unit '{template_id}' is not a hero.")
            heroes.append(self._create(template_id, rng))
        return heroes

    def build_enemy_waves(self, stage_id: str, rng: RNG) -> List[List[UnitInstance]]:
        """Instantiate every wave of a stage, scaled to the stage level."""
        stage = self.get_stage(stage_id)
        return [
            [self._create(template_id, rng, stage_level=stage.level) for template_id in wave]
            for wave in stage.waves
        ]

    def _create(self, template_id: str, rng: RNG, *, stage_level: int = 0) -> UnitInstance:
        instance = create_unit_instance(
            template_id,
            units_repo=self._units_repo,
            abilities_repo=self._abilities_repo,
            rng=rng,
            stage_level=stage_level,
            taken_ids=self._issued_ids,
        )
        self._issued_ids.add(instance.id)
        return instance

    # -----------------------
    # Battles
    # -----------------------
    def start_stage(self, stage_id: str, heroes: Sequence[UnitInstance], rng: RNG) -> BattleEngine:
        """Prepare an engine for a stage without running it."""
        waves = self.build_enemy_waves(stage_id, rng)
        logger.debug("Stage %s: %d heroes against %d waves", stage_id, len(heroes), len(waves))
        return BattleEngine(heroes, waves, rng=rng, config=self._config)

    def simulate_stage(self, stage_id: str, heroes: Sequence[UnitInstance], rng: RNG) -> BattleState:
        return self.start_stage(stage_id, heroes, rng).run()
