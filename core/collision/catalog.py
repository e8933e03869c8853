from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

import yaml
from loguru import logger

from core.exceptions import ConfigurationError


@dataclass(frozen=True)
class EquipmentRecord:
    id: int
    name: str
    width_ft: float
    depth_ft: float


class EquipmentCatalog(Mapping[int, EquipmentRecord]):
    """Read-only lookup of equipment footprints by id."""

    def __init__(self, records: Iterable[EquipmentRecord] = ()) -> None:
        self._records: dict[int, EquipmentRecord] = {record.id: record for record in records}

    def __getitem__(self, equipment_id: int) -> EquipmentRecord:
        return self._records[equipment_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EquipmentCatalog":
        records = []
        for item in payload.get("equipment") or []:
            try:
                records.append(
                    EquipmentRecord(
                        id=int(item["id"]),
                        name=str(item["name"]),
                        width_ft=float(item["width_ft"]),
                        depth_ft=float(item["depth_ft"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid equipment entry: {item!r}") from exc
        return cls(records)

    @classmethod
    def load(cls, path: Path) -> "EquipmentCatalog":
        if not path.exists():
            raise ConfigurationError(f"Equipment catalog not found: {path}", {"path": str(path)})
        with path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp) or {}
        catalog = cls.from_payload(payload)
        logger.info("Loaded {count} equipment record(s) from {path}", count=len(catalog), path=str(path))
        return catalog


__all__ = ["EquipmentRecord", "EquipmentCatalog"]
