from wwah_search.client.tokens import FileTokenStore, MemoryTokenStore


def test_file_store_round_trip(tmp_path):
    store = FileTokenStore(tmp_path / "auth" / "token")

    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"

    store.delete()
    assert store.get() is None


def test_blank_file_means_no_token(tmp_path):
    path = tmp_path / "token"
    path.write_text("  \n", encoding="utf-8")

    assert FileTokenStore(path).get() is None


def test_delete_without_file_is_quiet(tmp_path):
    FileTokenStore(tmp_path / "missing").delete()


def test_memory_store():
    store = MemoryTokenStore("t")
    store.delete()
    assert store.get() is None


def test_undecodable_file_means_no_token(tmp_path):
    path = tmp_path / "token"
    path.write_bytes(b"\xff\xfe\xfa")

    assert FileTokenStore(path).get() is None


def test_directory_path_means_no_token(tmp_path):
    assert FileTokenStore(tmp_path).get() is None
