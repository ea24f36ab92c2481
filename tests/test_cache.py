from unittest.mock import MagicMock

from wwah_search.search.cache import HandleCache, domain_key, user_key


def test_keys_are_namespaced():
    assert domain_key("courses") == "domain_courses"
    assert user_key("courses") == "user_courses"


def test_get_set_delete():
    cache = HandleCache()
    handle = MagicMock()

    assert cache.get("domain_courses") is None
    cache.set("domain_courses", handle)

    assert cache.get("domain_courses") is handle
    assert "domain_courses" in cache
    assert len(cache) == 1
    assert cache.delete("domain_courses") is True
    assert cache.delete("domain_courses") is False


def test_clear_by_prefix():
    cache = HandleCache()
    for key in ("domain_a", "domain_b", "user_1"):
        cache.set(key, MagicMock())

    assert cache.clear(prefix="domain_") == 2
    assert cache.keys() == ["user_1"]
    assert cache.clear() == 1
    assert len(cache) == 0
