import pytest

from legend.descriptors import (
    Descriptor,
    FallbackCache,
    build_table,
    format_fallback_label,
)


def _fallback(descriptor_id):
    return Descriptor(id=descriptor_id, label=format_fallback_label(descriptor_id))


@pytest.fixture
def table(cache):
    return build_table(
        [("gold", Descriptor(id="gold", label="Gold", icon="🪙"))],
        _fallback,
        namespace="resources",
        cache=cache,
    )


def test_format_fallback_label():
    assert format_fallback_label("resource_one-two") == "Resource One Two"
    assert format_fallback_label("castle") == "Castle"
    assert format_fallback_label("double__under--score") == "Double Under Score"


def test_format_fallback_label_keeps_separator_only_ids():
    assert format_fallback_label("__") == "__"


def test_known_entry_is_returned(table):
    assert table.get("gold").label == "Gold"
    assert table.has("gold")
    assert "gold" in table


def test_fallback_is_idempotent(table):
    first = table.get("unknown-x")
    second = table.get("unknown-x")
    assert first is second
    assert first.label == "Unknown X"


def test_fallback_factory_runs_once(cache):
    calls = []

    def factory(descriptor_id):
        calls.append(descriptor_id)
        return _fallback(descriptor_id)

    table = build_table([], factory, cache=cache)
    table.get("missing")
    table.get("missing")
    assert calls == ["missing"]


def test_record_lists_known_ids_only(table):
    table.get("unknown-x")
    assert list(table.record) == ["gold"]
    assert "unknown-x" not in table
    assert len(table) == 1


def test_record_is_read_only(table):
    with pytest.raises(TypeError):
        table.record["silver"] = _fallback("silver")


def test_values_keep_entry_order(cache):
    table = build_table(
        [("b", _fallback("b")), ("a", _fallback("a"))], _fallback, cache=cache
    )
    assert [descriptor.id for descriptor in table.values()] == ["b", "a"]
    assert list(table) == ["b", "a"]


def test_shared_cache_is_split_by_namespace(cache):
    resources = build_table([], _fallback, namespace="resources", cache=cache)
    buildings = build_table([], _fallback, namespace="buildings", cache=cache)
    assert resources.get("x") is not buildings.get("x")
    assert len(cache) == 2


def test_clearing_cache_drops_fallbacks(table, cache):
    first = table.get("unknown-x")
    cache.clear()
    second = table.get("unknown-x")
    assert first is not second
    assert first == second


def test_cache_get_or_create():
    cache = FallbackCache()
    value = cache.get_or_create("ns", "key", lambda: object())
    assert cache.get_or_create("ns", "key", lambda: object()) is value
    assert ("ns", "key") in cache


def test_descriptor_requires_label():
    with pytest.raises(ValueError):
        Descriptor(id="gold", label="")


def test_descriptor_is_frozen():
    descriptor = Descriptor(id="gold", label="Gold")
    with pytest.raises(AttributeError):
        descriptor.label = "Silver"
