import pytest
from pydantic import ValidationError

from wwah_search.core.errors import UnknownDomainError
from wwah_search.domains import (
    DOMAIN_REGISTRY,
    Domain,
    all_domains,
    get_domain_descriptor,
    resolve_domain,
)


def test_every_domain_is_registered():
    assert set(DOMAIN_REGISTRY) == set(Domain)
    assert [d.value for d in all_domains()] == [
        "countries",
        "universities",
        "courses",
        "scholarships",
        "expenses",
    ]


def test_course_descriptor():
    descriptor = get_domain_descriptor(Domain.COURSES)

    assert descriptor.collection_name == "course_embeddings"
    assert descriptor.index_name == "course_vector_index"
    assert descriptor.priority == 0.3
    assert descriptor.searchable_fields == ("title", "country", "degree", "subject", "university")


def test_string_keys_resolve():
    assert get_domain_descriptor("universities") is DOMAIN_REGISTRY[Domain.UNIVERSITIES]
    assert resolve_domain("expenses") is Domain.EXPENSES


def test_unknown_domain_rejected():
    with pytest.raises(UnknownDomainError):
        get_domain_descriptor("planets")


def test_collection_names_are_unique():
    names = [d.collection_name for d in DOMAIN_REGISTRY.values()]
    indexes = [d.index_name for d in DOMAIN_REGISTRY.values()]
    assert len(set(names)) == len(names)
    assert len(set(indexes)) == len(indexes)


def test_descriptor_is_immutable():
    descriptor = get_domain_descriptor(Domain.COUNTRIES)
    with pytest.raises(ValidationError):
        descriptor.priority = 0.9
