"""
Domain Registry

Static table describing every searchable content domain: where its
embeddings live, which vector index serves it, its relative priority and the
metadata fields callers may filter on.

The set of domains is closed. ``Domain`` enumerates it, and request models
validate against the enum so unknown keys never reach the search layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .core.errors import UnknownDomainError


class Domain(str, Enum):
    COUNTRIES = "countries"
    UNIVERSITIES = "universities"
    COURSES = "courses"
    SCHOLARSHIPS = "scholarships"
    EXPENSES = "expenses"


class DomainDescriptor(BaseModel):
    """
    Immutable storage and filtering configuration for one domain.
    """

    domain: Domain
    collection_name: str = Field(..., min_length=1)
    index_name: str = Field(..., min_length=1)
    priority: float = Field(..., ge=0.0, le=1.0)
    searchable_fields: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

DOMAIN_REGISTRY: Dict[Domain, DomainDescriptor] = {
    Domain.COUNTRIES: DomainDescriptor(
        domain=Domain.COUNTRIES,
        collection_name="country_embeddings",
        index_name="country_vector_index",
        priority=0.3,
        searchable_fields=("country", "capital", "language", "currency"),
    ),
    Domain.UNIVERSITIES: DomainDescriptor(
        domain=Domain.UNIVERSITIES,
        collection_name="university_embeddings",
        index_name="university_vector_index",
        priority=0.4,
        searchable_fields=("title", "country", "location", "ranking.qs", "ranking.the"),
    ),
    Domain.COURSES: DomainDescriptor(
        domain=Domain.COURSES,
        collection_name="course_embeddings",
        index_name="course_vector_index",
        priority=0.3,
        searchable_fields=("title", "country", "degree", "subject", "university"),
    ),
    Domain.SCHOLARSHIPS: DomainDescriptor(
        domain=Domain.SCHOLARSHIPS,
        collection_name="scholarship_embeddings",
        index_name="scholarship_vector_index",
        priority=0.2,
        searchable_fields=("title", "country", "type", "duration"),
    ),
    Domain.EXPENSES: DomainDescriptor(
        domain=Domain.EXPENSES,
        collection_name="expense_embeddings",
        index_name="expense_vector_index",
        priority=0.1,
        searchable_fields=("country", "university"),
    ),
}

USER_COLLECTION_NAME = "user_embeddings"
USER_INDEX_NAME = "user_vector_index"


def resolve_domain(domain: Union[Domain, str]) -> Domain:
    """
    Coerce a domain key to a ``Domain`` member.

    Raises
    ------
    UnknownDomainError
        If the key is not registered.
    """
    if isinstance(domain, Domain):
        return domain
    try:
        return Domain(domain)
    except ValueError as exc:
        raise UnknownDomainError(f"Domain '{domain}' is not registered") from exc


def get_domain_descriptor(domain: Union[Domain, str]) -> DomainDescriptor:
    return DOMAIN_REGISTRY[resolve_domain(domain)]


def all_domains() -> Tuple[Domain, ...]:
    """Registered domains in registry order."""
    return tuple(DOMAIN_REGISTRY)
