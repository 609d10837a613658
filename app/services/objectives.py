"""
Objective identifiers

Evaluations record achieved objectives in two schemes:
- Legacy: integer index into CLINICAL_OBJECTIVES (documents written before versioning)
- Versioned: '{outcomeId}-{phase}-{letter}' naming one expectation of CLINICAL_OBJECTIVES_V2

parse_objective_id is the single place that tells them apart.
"""
import re
from typing import Iterable, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict

_VERSIONED_PATTERN = re.compile(r"^(?P<outcome_id>[^-\s]+)-(?P<phase>middle|final)-(?P<letter>[a-z])$")


class LegacyObjective(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["legacy"] = "legacy"
    index: int


class VersionedObjective(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["versioned"] = "versioned"
    outcome_id: str
    phase: Literal["middle", "final"]
    letter: str

    @property
    def expectation_id(self) -> str:
        return f"{self.outcome_id}-{self.phase}-{self.letter}"


ObjectiveRef = Union[LegacyObjective, VersionedObjective]


def parse_objective_id(raw: Union[int, str, None]) -> Optional[ObjectiveRef]:
    """
    Normalize a stored objectivesAchieved entry

    Args:
        raw: Integer index, integer-like string, or composite expectation id

    Returns:
        LegacyObjective, VersionedObjective, or None if the value is not recognised
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return LegacyObjective(index=raw) if raw >= 0 else None
    value = str(raw).strip()
    if value.isdigit():
        return LegacyObjective(index=int(value))
    match = _VERSIONED_PATTERN.match(value)
    if match:
        return VersionedObjective(**match.groupdict())
    return None


def versioned_ids(entries: Iterable[Union[int, str]]) -> List[str]:
    """
    Expectation ids of the versioned entries, in input order (legacy entries dropped)
    """
    ids = []
    for entry in entries:
        ref = parse_objective_id(entry)
        if isinstance(ref, VersionedObjective):
            ids.append(ref.expectation_id)
    return ids


def legacy_indices(entries: Iterable[Union[int, str]]) -> List[int]:
    """
    Indices of the legacy entries, in input order
    """
    return [
        ref.index
        for ref in (parse_objective_id(entry) for entry in entries)
        if isinstance(ref, LegacyObjective)
    ]
