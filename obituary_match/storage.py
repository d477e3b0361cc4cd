# obituary_match/storage.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Tuple

from .scoring import parse_year

logger = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """No se pudo obtener la colección (archivo, JSON o estructura inválida)."""


class RecordValidationError(DataLoadError):
    """Un registro individual no cumple el esquema (falla en la ingesta)."""


# -------------------------------------------------------------------
# Domain model
# -------------------------------------------------------------------

@dataclass(frozen=True)
class BusinessAffiliation:
    name: str
    role: str


@dataclass(frozen=True)
class Record:
    full_name: str
    aliases: Tuple[str, ...]
    birth_year: int
    death_year: int
    last_residence: str
    occupation: str
    business_affiliations: Tuple[BusinessAffiliation, ...] = ()

    def names(self) -> Iterator[str]:
        """Nombre canónico primero, después los alias."""
        yield self.full_name
        yield from self.aliases

    def to_dict(self) -> Dict[str, Any]:
        return {
            "full_name": self.full_name,
            "aliases": list(self.aliases),
            "birth_year": self.birth_year,
            "death_year": self.death_year,
            "last_residence": self.last_residence,
            "occupation": self.occupation,
            "business_affiliations": [
                {"name": a.name, "role": a.role} for a in self.business_affiliations
            ],
        }


@dataclass(frozen=True)
class Business:
    name: str
    category: str


@dataclass(frozen=True)
class Sample:
    name: str
    year: Optional[int]


@dataclass(frozen=True)
class Dataset:
    businesses: Tuple[Business, ...] = ()
    records: Tuple[Record, ...] = ()
    samples: Tuple[Sample, ...] = ()

    def business_by_name(self) -> Dict[str, Business]:
        return {b.name: b for b in self.businesses}


class RecordRepository(Protocol):
    def iter_records(self) -> Iterable[Record]:
        ...


class InMemoryRecordRepository:
    def __init__(self, dataset: Dataset, source: str = "memory"):
        self.dataset = dataset
        self.source = source

    def iter_records(self) -> Iterable[Record]:
        return self.dataset.records

    def stats(self) -> Dict[str, Any]:
        """Info del repo cargado (para /metrics)."""
        return {
            "source": self.source,
            "records": len(self.dataset.records),
            "businesses": len(self.dataset.businesses),
            "samples": len(self.dataset.samples),
        }


# -------------------------------------------------------------------
# Helpers de validación
# -------------------------------------------------------------------

def _require_str(raw: Mapping[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RecordValidationError(f"{where}: falta el campo '{key}' (string no vacío)")
    return value


def _require_int(raw: Mapping[str, Any], key: str, where: str) -> int:
    value = raw.get(key)
    # bool es subclase de int: no lo aceptamos como año
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordValidationError(f"{where}: falta el campo '{key}' (entero)")
    return value


def _as_list(raw: Mapping[str, Any], key: str, where: str) -> List[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecordValidationError(f"{where}: '{key}' debe ser una lista")
    return value


def _build_record(raw: Any, idx: int) -> Record:
    where = f"obituaries[{idx}]"
    if not isinstance(raw, dict):
        raise RecordValidationError(f"{where}: se esperaba un objeto")

    aliases = _as_list(raw, "aliases", where)
    if not all(isinstance(a, str) for a in aliases):
        raise RecordValidationError(f"{where}: 'aliases' debe contener solo strings")

    affiliations: List[BusinessAffiliation] = []
    for j, aff in enumerate(_as_list(raw, "business_affiliations", where)):
        aff_where = f"{where}.business_affiliations[{j}]"
        if not isinstance(aff, dict):
            raise RecordValidationError(f"{aff_where}: se esperaba un objeto")
        affiliations.append(
            BusinessAffiliation(
                name=_require_str(aff, "name", aff_where),
                role=_require_str(aff, "role", aff_where),
            )
        )

    return Record(
        full_name=_require_str(raw, "full_name", where),
        aliases=tuple(aliases),
        birth_year=_require_int(raw, "birth_year", where),
        death_year=_require_int(raw, "death_year", where),
        last_residence=_require_str(raw, "last_residence", where),
        occupation=_require_str(raw, "occupation", where),
        business_affiliations=tuple(affiliations),
    )


def _build_business(raw: Any, idx: int) -> Business:
    where = f"businesses[{idx}]"
    if not isinstance(raw, dict):
        raise RecordValidationError(f"{where}: se esperaba un objeto")
    return Business(
        name=_require_str(raw, "name", where),
        category=_require_str(raw, "category", where),
    )


def _build_sample(raw: Any, idx: int) -> Sample:
    where = f"samples[{idx}]"
    if not isinstance(raw, dict):
        raise RecordValidationError(f"{where}: se esperaba un objeto")
    return Sample(name=_require_str(raw, "name", where), year=parse_year(raw.get("year")))


# -------------------------------------------------------------------
# Carga
# -------------------------------------------------------------------

def parse_dataset(payload: Any) -> Dataset:
    """
    Construye un Dataset desde el documento JSON original:
      {"businesses": [...], "obituaries": [...], "samples": [...]}
    Cualquier registro mal formado corta la carga completa.
    """
    if not isinstance(payload, dict):
        raise DataLoadError("El dataset debe ser un objeto JSON con 'businesses', 'obituaries' y 'samples'")

    sections = {}
    for key in ("businesses", "obituaries", "samples"):
        value = payload.get(key, [])
        if not isinstance(value, list):
            raise DataLoadError(f"'{key}' debe ser una lista")
        sections[key] = value

    return Dataset(
        businesses=tuple(_build_business(b, i) for i, b in enumerate(sections["businesses"])),
        records=tuple(_build_record(r, i) for i, r in enumerate(sections["obituaries"])),
        samples=tuple(_build_sample(s, i) for i, s in enumerate(sections["samples"])),
    )


def load_dataset(path: Path) -> Dataset:
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as exc:
        raise DataLoadError(f"No existe el dataset: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise DataLoadError(f"No se pudo leer el dataset {path}: {exc}") from exc

    dataset = parse_dataset(payload)
    logger.info(
        "Dataset cargado desde %s: businesses=%d obituaries=%d samples=%d",
        path, len(dataset.businesses), len(dataset.records), len(dataset.samples),
    )
    return dataset


# -------------------------------------------------------------------
# Public factory
# -------------------------------------------------------------------

def build_repository(data_path: Optional[str] = None) -> InMemoryRecordRepository:
    """
    Config por env:
      - DATA_PATH=data/data.json
    Levanta DataLoadError si la colección no se puede obtener.
    """
    path = Path(data_path or os.getenv("DATA_PATH", "data/data.json"))
    try:
        dataset = load_dataset(path)
    except DataLoadError:
        logger.error("Falló la carga del dataset desde %s", path)
        raise
    return InMemoryRecordRepository(dataset, source=str(path))
