"""
API Models

Pydantic request/response models for the search, stats and cache endpoints.
Domains are validated against the ``Domain`` enum, so unknown keys are
rejected before reaching the search layer.
"""

from __future__ import annotations

from typing import List, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict, model_validator

from ..domains import Domain
from ..search.filters import CourseFilters, ScholarshipFilters, UniversityFilters
from ..search.models import SearchOptions


# ---------------------------------------------------------------------
# Search Requests
# ---------------------------------------------------------------------

class SearchRequest(BaseModel):
    """
    Semantic search within one domain.
    """
    query: str
    domain: Domain
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


class MultiSearchRequest(BaseModel):
    """
    The same query fanned out to several domains; results keep domain order.
    """
    query: str
    domains: List[Domain] = Field(..., min_length=1)
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


class CourseSearchRequest(BaseModel):
    query: str
    filters: CourseFilters = Field(default_factory=CourseFilters)
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


class UniversitySearchRequest(BaseModel):
    query: str
    filters: UniversityFilters = Field(default_factory=UniversityFilters)
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


class ScholarshipSearchRequest(BaseModel):
    query: str
    filters: ScholarshipFilters = Field(default_factory=ScholarshipFilters)
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


class UserContextSearchRequest(BaseModel):
    query: str
    user_id: str = ""
    options: SearchOptions = Field(default_factory=SearchOptions)

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Cache Administration
# ---------------------------------------------------------------------

class CacheClearRequest(BaseModel):
    """
    Which cached handles to drop.

    - ``all``: every handle
    - ``domain``: one domain, or every domain handle if ``domain`` is omitted
    - ``user``: one user, or every user handle if ``user_id`` is omitted
    """
    scope: Literal["all", "domain", "user"] = "all"
    domain: Optional[Domain] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_scope_arguments(self) -> "CacheClearRequest":
        if self.domain is not None and self.scope != "domain":
            raise ValueError("'domain' is only valid with scope 'domain'.")
        if self.user_id is not None and self.scope != "user":
            raise ValueError("'user_id' is only valid with scope 'user'.")
        return self


class CacheClearResponse(BaseModel):
    status: Literal["cleared"] = "cleared"
    scope: str
    removed: int = Field(..., ge=0)
    remaining: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid")
