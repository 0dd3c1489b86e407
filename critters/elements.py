"""
Elemental types and the effectiveness chart.

The chart is static data: it ships as JSON under ``critters/data``,
is validated on load, and is never mutated afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from engine.resources.database import Database

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "data"

NEUTRAL = 1.0


@dataclass(frozen=True)
class TypeTag:
    """
    An elemental type.

    Equality and hashing use the name only, so tags loaded from two
    different charts still compare equal.
    """
    name: str
    description: str = field(default="", compare=False)
    status_name: Optional[str] = field(default=None, compare=False)

    @property
    def key(self) -> str:
        """Lookup key (lower-cased name)."""
        return self.name.lower()

    def __str__(self) -> str:
        return self.name


class EffectivenessTable:
    """
    Read-only (attacker, defender) -> multiplier lookup.

    Missing pairs are neutral (1.0). A 0.0 entry is full immunity.
    """

    def __init__(self, entries: Mapping[tuple[str, str], float] | None = None):
        table: dict[tuple[str, str], float] = {}
        for (attacker, defender), multiplier in (entries or {}).items():
            if multiplier < 0:
                raise ValueError(
                    f"Negative multiplier {multiplier} for {attacker} -> {defender}"
                )
            table[(attacker.lower(), defender.lower())] = float(multiplier)
        self._entries = MappingProxyType(table)

    def effectiveness(self, attacker: TypeTag, defender: TypeTag) -> float:
        return self._entries.get((attacker.key, defender.key), NEUTRAL)

    def combined(
        self,
        attack_types: Iterable[TypeTag],
        defend_types: Iterable[TypeTag],
    ) -> float:
        """
        Multiply every attacker-type x defender-type pair.

        Args:
            attack_types: Types on the attacking side (a creature's types,
                or a single skill type)
            defend_types: The defending creature's types

        Returns:
            Product of all pair multipliers (1.0 for empty input)
        """
        defenders = list(defend_types)
        result = NEUTRAL
        for attacker in attack_types:
            for defender in defenders:
                result *= self.effectiveness(attacker, defender)
        return result

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pair: tuple[str, str]) -> bool:
        return (pair[0].lower(), pair[1].lower()) in self._entries


class TypeRoster:
    """Ordered, name-unique collection of the types a game knows about."""

    def __init__(self, tags: Iterable[TypeTag] = ()):
        self._tags: dict[str, TypeTag] = {}
        for tag in tags:
            if tag.key in self._tags:
                raise ValueError(f"Duplicate type name: {tag.name}")
            self._tags[tag.key] = tag

    def get(self, name: str) -> Optional[TypeTag]:
        """Find a type by (case-insensitive) name; None if unknown."""
        return self._tags.get(name.lower())

    def require(self, name: str) -> TypeTag:
        tag = self.get(name)
        if tag is None:
            raise KeyError(f"Unknown type: {name}")
        return tag

    def first(self) -> Optional[TypeTag]:
        return next(iter(self._tags.values()), None)

    def all(self) -> list[TypeTag]:
        return list(self._tags.values())

    def __iter__(self) -> Iterator[TypeTag]:
        return iter(self._tags.values())

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        if isinstance(tag, TypeTag):
            return tag.key in self._tags
        if isinstance(tag, str):
            return tag.lower() in self._tags
        return False


@dataclass(frozen=True)
class TypeChart:
    """Roster plus effectiveness table, loaded together."""
    roster: TypeRoster
    table: EffectivenessTable

    def effectiveness(self, attacker: TypeTag, defender: TypeTag) -> float:
        return self.table.effectiveness(attacker, defender)

    def combined(self, attack_types: Iterable[TypeTag], defend_types: Iterable[TypeTag]) -> float:
        return self.table.combined(attack_types, defend_types)


def build_type_chart(records: Mapping[str, Mapping]) -> TypeChart:
    """
    Build a chart from validated type records (as loaded by Database).

    References to unknown types are logged and dropped.
    """
    ordered = sorted(records.values(), key=lambda r: (r.get('order', len(records)), r['id']))
    tags = [
        TypeTag(
            name=record['name'],
            description=record.get('description', ""),
            status_name=record.get('status_name'),
        )
        for record in ordered
    ]
    roster = TypeRoster(tags)

    entries: dict[tuple[str, str], float] = {}
    for record in ordered:
        attacker = roster.require(record['name'])
        for defender_id, multiplier in record.get('effectiveness', {}).items():
            defender_record = records.get(defender_id)
            if defender_record is None:
                logger.warning(f"Type '{record['id']}' references unknown type '{defender_id}', ignoring")
                continue
            entries[(attacker.key, defender_record['name'].lower())] = multiplier

    return TypeChart(roster=roster, table=EffectivenessTable(entries))


def load_type_chart(data_path: Path | str) -> TypeChart:
    """Load and validate a type chart from a data directory."""
    database = Database(data_path)
    database.load_all()
    chart = build_type_chart(database.types)
    logger.info(f"Type chart ready: {len(chart.roster)} types, {len(chart.table)} matchups")
    return chart


@lru_cache(maxsize=1)
def default_chart() -> TypeChart:
    return load_type_chart(DEFAULT_DATA_PATH)
