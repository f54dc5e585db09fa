from arpsim.cache import empty_caches, format_cache, get_cache_summary, is_empty, lookup, update


def test_lookup_missing_returns_none():
    caches = empty_caches(["PC1", "PC3"])
    assert lookup(caches, "PC1", "192.168.1.30") is None
    assert lookup(caches, "PCX", "192.168.1.30") is None


def test_update_is_pure():
    caches = empty_caches(["PC1"])
    updated = update(caches, "PC1", "192.168.1.30", "00:1a:2b:3c:4d:30")
    assert caches == {"PC1": {}}
    assert lookup(updated, "PC1", "192.168.1.30") == "00:1a:2b:3c:4d:30"


def test_update_keeps_existing_entries_and_is_idempotent():
    caches = update(empty_caches(["PC1"]), "PC1", "192.168.1.20", "aa")
    caches = update(caches, "PC1", "192.168.1.30", "bb")
    again = update(caches, "PC1", "192.168.1.30", "bb")
    assert again == caches == {"PC1": {"192.168.1.20": "aa", "192.168.1.30": "bb"}}


def test_is_empty():
    caches = empty_caches(["PC1", "PC3"])
    assert is_empty(caches, "PC1")
    caches = update(caches, "PC1", "192.168.1.30", "bb")
    assert not is_empty(caches, "PC1")
    assert is_empty(caches, "PC3")


def test_format_cache():
    assert format_cache({}) == "(empty)"
    assert format_cache({"192.168.1.30": "bb", "192.168.1.20": "aa"}) == (
        "192.168.1.30 -> bb\n192.168.1.20 -> aa"
    )


def test_cache_summary_uses_host_names(topology):
    caches = update(empty_caches(["PC1"]), "PC1", "192.168.1.30", "bb")
    summary = get_cache_summary(caches, topology.hosts)
    assert summary == [{"hostId": "PC1", "hostName": "PC1", "ip": "192.168.1.30", "mac": "bb"}]
