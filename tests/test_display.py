from legend.resources import build_display_buckets, is_stat_id


def test_is_stat_id():
    assert is_stat_id("resource:core:stat:growth")
    assert not is_stat_id("resource:core:happiness")


def test_buckets_partition_catalog(registry):
    buckets = build_display_buckets(registry.catalog)
    assert [entry.id for entry in buckets.resources] == ["resource:core:happiness"]
    assert [entry.id for entry in buckets.stats] == ["resource:core:stat:growth"]
    assert [group.id for group in buckets.groups] == ["group:pop"]


def test_group_children_are_reconciled(registry):
    group = build_display_buckets(registry.catalog).groups[0]
    assert [child.id for child in group.children] == [
        "resource:pop:b",
        "resource:pop:a",
        "resource:pop:c",
    ]
    assert group.display.name == "Population"


def test_group_value_comes_from_parent_snapshot(registry):
    values = {"resource:pop:a": 2, "resource:pop:b": 1, "resource:pop:total": 3}
    group = build_display_buckets(registry.catalog, values).groups[0]
    assert group.value == 3
    assert group.children[0].value == 1


def test_group_value_is_not_recomputed(registry):
    values = {"resource:pop:a": 2, "resource:pop:b": 1}
    group = build_display_buckets(registry.catalog, values).groups[0]
    assert group.value is None


def test_entries_carry_percent_flag(registry):
    buckets = build_display_buckets(registry.catalog, {"resource:core:stat:growth": 0.25})
    growth = buckets.stats[0]
    assert growth.percent is True
    assert growth.value == 0.25
    assert buckets.resources[0].percent is False
