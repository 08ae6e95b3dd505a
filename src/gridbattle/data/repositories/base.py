"""Base repository implementation for JSON definition data."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Generic, List, Type, TypeVar

from gridbattle.data import paths
from gridbattle.data.errors import DataValidationError
from gridbattle.data.json_loader import load_json_object

T = TypeVar("T")
EnumT = TypeVar("EnumT", bound=Enum)


class RepositoryBase(Generic[T]):
    """Common caching, loading and field validation for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        return paths.get_definitions_path(self._base_path) / self._filename

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> Dict[str, T]:
        if self._definitions is None:
            raw = load_json_object(self._get_file_path())
            for raw_id in raw:
                if not raw_id:
                    raise DataValidationError(f"Empty id in {self._filename}.")
            self._definitions = self._build(raw)
        return self._definitions

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        definitions = self._ensure_loaded()
        try:
            return definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def has(self, def_id: str) -> bool:
        return def_id in self._ensure_loaded()

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        definitions = self._ensure_loaded()
        return [definitions[key] for key in sorted(definitions)]

    # -----------------------
    # Field validation
    # -----------------------
    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object.")
        return value

    @staticmethod
    def _assert_fields(
        payload: dict[str, object], *, required: set[str], optional: set[str] = frozenset(), context: str
    ) -> None:
        missing = required - payload.keys()
        if missing:
            raise DataValidationError(f"{context} missing fields: {sorted(missing)}")
        unknown = payload.keys() - required - optional
        if unknown:
            raise DataValidationError(f"{context} has unknown fields: {sorted(unknown)}")

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str, *, minimum: int | None = None) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        if minimum is not None and value < minimum:
            raise DataValidationError(f"{context} must be >= {minimum}.")
        return value

    @staticmethod
    def _require_number(value: object, context: str, *, minimum: float | None = None) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        if minimum is not None and value < minimum:
            raise DataValidationError(f"{context} must be >= {minimum}.")
        return float(value)

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    @staticmethod
    def _require_enum(value: object, enum_cls: Type[EnumT], context: str) -> EnumT:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        try:
            return enum_cls(value)
        except ValueError as exc:
            allowed = sorted(member.value for member in enum_cls)
            raise DataValidationError(f"{context} must be one of {allowed}, got '{value}'.") from exc
