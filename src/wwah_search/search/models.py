"""
Search Data Models

Options, results and stats snapshots exchanged between the search layer,
the API routes and their callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from ..domains import Domain


class SearchOptions(BaseModel):
    """
    Per-query options.

    ``filter`` maps metadata field names to conditions (see ``filters``).
    """

    filter: Dict[str, Any] = Field(default_factory=dict)
    limit: int = Field(
        default_factory=lambda: settings.default_search_limit,
        ge=1,
        le=100,
    )
    include_metadata: bool = True
    similarity_threshold: float = Field(
        default_factory=lambda: settings.default_similarity_threshold,
        ge=0.0,
        le=1.0,
    )

    model_config = ConfigDict(extra="forbid")


class SearchResult(BaseModel):
    """
    Single match from one domain (or the caller's personal collection).
    """

    page_content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    score: float = Field(..., ge=0.0, le=1.0)
    domain: str

    model_config = ConfigDict(extra="forbid")


@dataclass
class SearchOutcome:
    """
    Result of one domain search, keeping backend failures distinguishable
    from empty result sets.
    """

    domain: str
    results: List[SearchResult] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DomainStats(BaseModel):
    total_documents: int = Field(..., ge=0)
    domain: Domain
    collection_name: str
    searchable_fields: List[str] = Field(default_factory=list)
    # False when the count could not be read and total_documents is a default
    available: bool = True


class AggregateStats(BaseModel):
    total_documents: int = Field(..., ge=0)
    domain_stats: List[DomainStats] = Field(default_factory=list)
    last_updated: datetime
