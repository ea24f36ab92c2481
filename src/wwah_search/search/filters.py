"""
Metadata Filters

Structured filter conditions consumed by ``VectorStore`` and the
domain-specific builders used by the search helpers.

A filter is a mapping of metadata field name to condition. Dotted field names
(``ranking.qs``) address nested metadata. A bare value means exact match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict


# ---------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Equals:
    value: Any


@dataclass(frozen=True)
class Contains:
    """Substring match, case-insensitive unless told otherwise."""
    value: str
    case_insensitive: bool = True


@dataclass(frozen=True)
class AtMost:
    value: Any


@dataclass(frozen=True)
class AtLeast:
    value: Any


Condition = Union[Equals, Contains, AtMost, AtLeast]
MetadataFilter = Dict[str, Condition]

_OPERATORS = {
    "eq": Equals,
    "contains": Contains,
    "lte": AtMost,
    "gte": AtLeast,
}


def parse_condition(raw: Any) -> Condition:
    """
    Turn a raw filter value into a condition.

    Accepts condition instances, ``{"op": ..., "value": ...}`` mappings as
    sent over JSON, and bare values (exact match).
    """
    if isinstance(raw, (Equals, Contains, AtMost, AtLeast)):
        return raw

    if isinstance(raw, Mapping) and "op" in raw:
        op = raw["op"]
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op!r}")
        if "value" not in raw:
            raise ValueError(f"Filter operator {op!r} requires a 'value'.")
        if op == "contains":
            return Contains(
                str(raw["value"]),
                case_insensitive=bool(raw.get("case_insensitive", True)),
            )
        return _OPERATORS[op](raw["value"])

    return Equals(raw)


def normalize_filter(raw: Optional[Mapping[str, Any]]) -> MetadataFilter:
    if not raw:
        return {}
    return {field: parse_condition(value) for field, value in raw.items()}


# ---------------------------------------------------------------------
# Typed filter criteria
# ---------------------------------------------------------------------

class CourseFilters(BaseModel):
    country: Optional[str] = None
    degree: Optional[str] = None
    subject: Optional[str] = None
    university: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RankingFilters(BaseModel):
    qs: Optional[int] = None
    the: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class UniversityFilters(BaseModel):
    country: Optional[str] = None
    location: Optional[str] = None
    ranking: Optional[RankingFilters] = None

    model_config = ConfigDict(extra="forbid")


class ScholarshipFilters(BaseModel):
    country: Optional[str] = None
    type: Optional[str] = None
    # ISO date; matches scholarships whose deadline is on or after it
    deadline: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------

def build_course_filter(filters: Optional[CourseFilters] = None) -> MetadataFilter:
    filters = filters or CourseFilters()
    built: MetadataFilter = {}

    if filters.country:
        built["country"] = Equals(filters.country)
    if filters.degree:
        built["degree"] = Equals(filters.degree)
    if filters.subject:
        built["subject"] = Contains(filters.subject)
    if filters.university:
        built["university"] = Contains(filters.university)

    return built


def build_university_filter(filters: Optional[UniversityFilters] = None) -> MetadataFilter:
    filters = filters or UniversityFilters()
    built: MetadataFilter = {}

    if filters.country:
        built["country"] = Equals(filters.country)
    if filters.location:
        built["location"] = Contains(filters.location)
    if filters.ranking is not None:
        # Rankings are "best is 1", so an upper bound keeps the top N
        if filters.ranking.qs:
            built["ranking.qs"] = AtMost(filters.ranking.qs)
        if filters.ranking.the:
            built["ranking.the"] = AtMost(filters.ranking.the)

    return built


def build_scholarship_filter(filters: Optional[ScholarshipFilters] = None) -> MetadataFilter:
    filters = filters or ScholarshipFilters()
    built: MetadataFilter = {}

    if filters.country:
        built["country"] = Equals(filters.country)
    if filters.type:
        built["type"] = Equals(filters.type)
    if filters.deadline:
        built["deadline"] = AtLeast(filters.deadline)

    return built
