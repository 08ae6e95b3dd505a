"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime unit cannot be created from its template."""


class BattleSetupError(Exception):
    """Raised when a battle is started with rosters the engine cannot place."""
