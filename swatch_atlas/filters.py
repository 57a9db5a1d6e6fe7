from __future__ import annotations

"""
Categorical multi-select filter.

Each field is either unrestricted (None) or restricted to a set of allowed
values. An empty set matches nothing. A record passes when every field is
unrestricted or contains the record's value.
"""

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .core_types import FIELDS, Field, SwatchRecord, field_value, parse_field

Selection = Optional[FrozenSet[str]]
FilterSelection = Mapping[Field, Selection]


def unrestricted() -> Dict[Field, Selection]:
    """A selection map with every field unrestricted."""
    return {f: None for f in FIELDS}


def passes(record: SwatchRecord, selection: FilterSelection) -> bool:
    """True when `record` satisfies every field of `selection`."""
    for f in FIELDS:
        allowed = selection.get(f)
        if allowed is not None and field_value(record, f) not in allowed:
            return False
    return True


def parse_filter_spec(specs: Iterable[str]) -> Dict[Field, FrozenSet[str]]:
    """
    Parse CLI filters like 'pH=Acidic,Neutral' or 'mordant=' (empty: match nothing).
    Repeating a field merges its values.
    """
    out: Dict[Field, FrozenSet[str]] = {}
    for spec in specs:
        name, sep, raw = spec.partition("=")
        if not sep:
            raise ValueError(f"filter must look like FIELD=V1,V2: {spec!r}")
        f = parse_field(name)
        values = frozenset(v.strip() for v in raw.split(",") if v.strip())
        out[f] = out.get(f, frozenset()) | values
    return out


class FilterEngine:
    """Holds the per-field selections and evaluates them against records."""

    def __init__(self, selection: Optional[FilterSelection] = None) -> None:
        self._selection: Dict[Field, Selection] = unrestricted()
        if selection is not None:
            for f, values in selection.items():
                self.set_selection(f, values)

    @property
    def selection(self) -> Dict[Field, Selection]:
        """Copy of the current selection map."""
        return dict(self._selection)

    def selection_for(self, field: Field) -> Selection:
        return self._selection[field]

    def set_selection(self, field: Field, values: Optional[Iterable[str]]) -> None:
        """None makes the field unrestricted; otherwise replaces the allowed set."""
        self._selection[field] = None if values is None else frozenset(values)

    def select_all(self) -> None:
        self._selection = unrestricted()

    def clear_all(self) -> None:
        """Restrict every field to the empty set (nothing passes)."""
        self._selection = {f: frozenset() for f in FIELDS}

    def toggle(self, field: Field, value: str, universe: Sequence[str]) -> None:
        """
        Checkbox semantics. Toggling on an unrestricted field starts from the
        full `universe`; a selection that grows back to the universe becomes
        unrestricted again.
        """
        current = self._selection[field]
        allowed = set(universe) if current is None else set(current)
        if value in allowed:
            allowed.discard(value)
        else:
            allowed.add(value)
        self._selection[field] = None if allowed >= set(universe) else frozenset(allowed)

    def passes(self, record: SwatchRecord) -> bool:
        return passes(record, self._selection)

    def apply(self, records: Iterable[SwatchRecord]) -> List[SwatchRecord]:
        """Records that pass, in input order."""
        return [r for r in records if passes(r, self._selection)]

    def counts(self, records: Sequence[SwatchRecord]) -> Tuple[int, int]:
        """(total, shown) for status displays."""
        return len(records), sum(1 for r in records if passes(r, self._selection))


__all__ = [
    "Selection",
    "FilterSelection",
    "unrestricted",
    "passes",
    "parse_filter_spec",
    "FilterEngine",
]
