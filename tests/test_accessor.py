import pytest

from wwah_search.core.errors import ConnectivityError
from wwah_search.db.vector_store import VectorStore
from wwah_search.domains import Domain, all_domains


@pytest.mark.asyncio
async def test_domain_handle_is_memoized(accessor, mock_database):
    first = await accessor.get_domain_handle(Domain.COURSES)
    second = await accessor.get_domain_handle("courses")

    assert first is second
    assert isinstance(first, VectorStore)
    assert first.collection_name == "course_embeddings"
    assert first.index_name == "course_vector_index"
    mock_database.connect.assert_awaited_once()


@pytest.mark.asyncio
async def test_every_domain_gets_its_own_handle(accessor):
    handles = {domain: await accessor.get_domain_handle(domain) for domain in all_domains()}

    assert len({id(h) for h in handles.values()}) == len(handles)
    for domain, handle in handles.items():
        assert handle is await accessor.get_domain_handle(domain)


@pytest.mark.asyncio
async def test_clear_one_domain_keeps_others(accessor, mock_database):
    courses = await accessor.get_domain_handle(Domain.COURSES)
    countries = await accessor.get_domain_handle(Domain.COUNTRIES)

    assert accessor.clear_domain_cache(Domain.COURSES) == 1

    assert await accessor.get_domain_handle(Domain.COUNTRIES) is countries
    rebuilt = await accessor.get_domain_handle(Domain.COURSES)
    assert rebuilt is not courses
    assert mock_database.connect.await_count == 3


@pytest.mark.asyncio
async def test_clear_all_domains_keeps_user_handles(accessor):
    await accessor.get_domain_handle(Domain.COURSES)
    await accessor.get_domain_handle(Domain.EXPENSES)
    user = await accessor.get_user_handle("u-1")

    assert accessor.clear_domain_cache() == 2
    assert accessor.cache.keys() == ["user_u-1"]
    assert await accessor.get_user_handle("u-1") is user


@pytest.mark.asyncio
async def test_user_handle_scoped_and_memoized(accessor):
    handle = await accessor.get_user_handle("abc")

    assert handle is await accessor.get_user_handle("abc")
    assert handle.user_id == "abc"
    assert handle.collection_name == "user_embeddings"
    assert handle.index_name == "user_vector_index"
    assert handle is not await accessor.get_user_handle("xyz")


@pytest.mark.asyncio
async def test_empty_user_id_returns_no_handle(accessor, mock_database):
    assert await accessor.get_user_handle("") is None
    assert await accessor.get_user_handle(None) is None
    mock_database.connect.assert_not_awaited()


@pytest.mark.asyncio
async def test_domain_and_user_keys_never_collide(accessor):
    domain_handle = await accessor.get_domain_handle(Domain.COURSES)
    user_handle = await accessor.get_user_handle("courses")

    assert domain_handle is not user_handle
    assert sorted(accessor.cache.keys()) == ["domain_courses", "user_courses"]


@pytest.mark.asyncio
async def test_clear_user_cache(accessor):
    await accessor.get_user_handle("a")
    await accessor.get_user_handle("b")
    await accessor.get_domain_handle(Domain.COURSES)

    assert accessor.clear_user_cache("a") == 1
    assert accessor.clear_user_cache("a") == 0
    assert accessor.clear_user_cache() == 1
    assert accessor.cache.keys() == ["domain_courses"]


@pytest.mark.asyncio
async def test_clear_all_caches(accessor):
    await accessor.get_user_handle("a")
    await accessor.get_domain_handle(Domain.COURSES)

    assert accessor.clear_all_caches() == 2
    assert len(accessor.cache) == 0


@pytest.mark.asyncio
async def test_connectivity_failure_propagates_and_caches_nothing(accessor, mock_database):
    mock_database.connect.side_effect = ConnectivityError("down")

    with pytest.raises(ConnectivityError):
        await accessor.get_domain_handle(Domain.COURSES)

    assert len(accessor.cache) == 0


@pytest.mark.asyncio
async def test_get_all_domain_handles(accessor):
    entries = await accessor.get_all_domain_handles()

    assert [domain for domain, _, _ in entries] == list(all_domains())
    for domain, handle, descriptor in entries:
        assert descriptor.domain is domain
        assert handle.collection_name == descriptor.collection_name
