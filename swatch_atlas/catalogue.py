# swatch_atlas/catalogue.py
from __future__ import annotations

"""
Swatch catalogue: typed records and per-field value indexes.

Exports:
  parse_row(row) -> SwatchRecord                 # raises MalformedRecord
  parse_minutes(label) -> float
  FIELD_SORT_KEYS: dict[Field, key function]
  build_field_index(records, field) -> tuple[str, ...]
  display_label(field, value) -> str
  load_lookup(path) -> list[dict]                # JSON array/object or CSV
  SwatchCatalogue.load(rows, debug=False)

Ordering rules per field:
  dyestuff / mordant / additive : alphabetic, case-insensitive
  pH                            : Acidic, Neutral, Alkaline; unknown labels after
  time                          : by minutes ("30m" = 30, "12h" = 720)
Sorts are stable, so values with equal keys keep first-seen order.
"""

import csv
import json
import math
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .constants import MINUTES_PER_HOUR, PH_LABELS, PH_ORDER
from .core_types import FIELDS, Field, SwatchRecord, field_value
from .errors import MalformedRecord
from .utils import debug_log, key_value_pairs_to_string, warn

FieldIndex = Tuple[str, ...]

FIELD_TITLES: Dict[Field, str] = {
    Field.DYESTUFF: "Dyestuff",
    Field.PH: "pH",
    Field.MORDANT: "Mordant",
    Field.ADDITIVE: "Additive",
    Field.TIME: "Time",
}

_TIME_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([mh])", re.IGNORECASE)


# Row parsing


def _finite_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _label(value: Any) -> str:
    return "" if value is None else str(value)


def parse_row(row: Mapping[str, Any]) -> SwatchRecord:
    """
    Build a SwatchRecord from one lookup row.
    Keys: filename, h, s, b, dyestuff, pH, mordant, additive, time.
    """
    if not isinstance(row, Mapping):
        raise MalformedRecord("row is not an object")
    filename = _label(row.get("filename")).strip()
    if not filename:
        raise MalformedRecord("row without filename")
    h = _finite_float(row.get("h"))
    s = _finite_float(row.get("s"))
    b = _finite_float(row.get("b"))
    if h is None or s is None or b is None:
        raise MalformedRecord(f"non-numeric h/s/b for {filename!r}")
    return SwatchRecord(
        filename=filename,
        h=h,
        s=s,
        b=b,
        dyestuff=_label(row.get("dyestuff")),
        ph=_label(row.get("pH")),
        mordant=_label(row.get("mordant")),
        additive=_label(row.get("additive")),
        time=_label(row.get("time")),
    )


# Field ordering


def parse_minutes(label: str) -> float:
    """Exposure label to minutes: '30m' -> 30, '12h' -> 720. Unparseable -> 0."""
    m = _TIME_RE.match(label)
    if m is None:
        value = _finite_float(label)
        return 0.0 if value is None else value
    amount = float(m.group(1))
    return amount * MINUTES_PER_HOUR if m.group(2).lower() == "h" else amount


def _alpha_key(value: str) -> Tuple[str, str]:
    return (value.casefold(), value)


def _ph_key(value: str) -> int:
    return PH_ORDER.index(value) if value in PH_ORDER else len(PH_ORDER)


FIELD_SORT_KEYS: Dict[Field, Callable[[str], Any]] = {
    Field.DYESTUFF: _alpha_key,
    Field.PH: _ph_key,
    Field.MORDANT: _alpha_key,
    Field.ADDITIVE: _alpha_key,
    Field.TIME: parse_minutes,
}


def sort_field_values(field: Field, values: Iterable[str]) -> FieldIndex:
    """Distinct values in first-seen order, then sorted by the field's rule."""
    seen: Dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return tuple(sorted(seen, key=FIELD_SORT_KEYS[field]))


def build_field_index(records: Iterable[SwatchRecord], field: Field) -> FieldIndex:
    """Ordered distinct values of `field` across `records`."""
    return sort_field_values(field, (field_value(r, field) for r in records))


def display_label(field: Field, value: str) -> str:
    """Annotated label for UIs; the underlying value is unchanged."""
    if field is Field.PH:
        return PH_LABELS.get(value, value)
    if field is Field.TIME and value.lower().endswith("h"):
        return f"{value} (~{parse_minutes(value):g}m)"
    return value


# Lookup table I/O


def load_lookup(path: Path) -> List[Dict[str, Any]]:
    """
    Read the swatch lookup table.
    JSON may be an array of rows or an object of rows (values are used).
    CSV must carry the same column names.
    """
    if path.suffix.lower() == ".csv":
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            return [dict(row) for row in csv.DictReader(f, skipinitialspace=True)]
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, Mapping):
        data = list(data.values())
    if not isinstance(data, list):
        raise ValueError(f"lookup must be a JSON array or object: {path}")
    return [row for row in data if isinstance(row, Mapping)]


# Catalogue


class SwatchCatalogue:
    """Immutable list of swatch records with per-field value indexes."""

    def __init__(self, records: Sequence[SwatchRecord]) -> None:
        self._records: Tuple[SwatchRecord, ...] = tuple(records)
        self._by_name: Dict[str, SwatchRecord] = {r.filename: r for r in self._records}
        self._indexes: Dict[Field, FieldIndex] = self._build_indexes()

    @classmethod
    def load(
        cls,
        rows: Iterable[Mapping[str, Any]] | Mapping[str, Mapping[str, Any]],
        debug: bool = False,
    ) -> "SwatchCatalogue":
        """
        Parse raw rows. Rows with non-finite h/s/b are dropped silently;
        repeated filenames keep the first row.
        """
        if isinstance(rows, Mapping):
            rows = list(rows.values())

        records: List[SwatchRecord] = []
        names: set[str] = set()
        malformed = 0
        duplicates = 0
        for row in rows:
            try:
                rec = parse_row(row)
            except MalformedRecord:
                malformed += 1
                continue
            if rec.filename in names:
                duplicates += 1
                continue
            names.add(rec.filename)
            records.append(rec)

        if duplicates:
            warn(f"{duplicates} duplicate filename row(s) ignored")
        if debug:
            debug_log(
                key_value_pairs_to_string(
                    [("Swatches", len(records)), ("Malformed", malformed)]
                )
            )
        return cls(records)

    def _build_indexes(self) -> Dict[Field, FieldIndex]:
        first_seen: Dict[Field, Dict[str, None]] = {f: {} for f in FIELDS}
        for rec in self._records:
            for f in FIELDS:
                first_seen[f].setdefault(field_value(rec, f), None)
        return {f: sort_field_values(f, first_seen[f]) for f in FIELDS}

    @property
    def records(self) -> Tuple[SwatchRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SwatchRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def get(self, filename: str) -> Optional[SwatchRecord]:
        return self._by_name.get(filename)

    def unique_values(self, field: Field) -> FieldIndex:
        """FieldIndex for `field` across the whole catalogue."""
        return self._indexes[field]

    def restrict_to(self, filenames: Iterable[str]) -> "SwatchCatalogue":
        """New catalogue with only the named records, in catalogue order."""
        keep = set(filenames)
        return SwatchCatalogue([r for r in self._records if r.filename in keep])


__all__ = [
    "FieldIndex",
    "FIELD_TITLES",
    "FIELD_SORT_KEYS",
    "parse_row",
    "parse_minutes",
    "sort_field_values",
    "build_field_index",
    "display_label",
    "load_lookup",
    "SwatchCatalogue",
]
