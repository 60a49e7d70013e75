import pytest

from legend.errors import MetadataError, MissingAssetError
from legend.registry import MetadataRegistry


def test_missing_land_asset_fails(registries_payload, metadata_payload):
    del metadata_payload["assets"]["land"]
    with pytest.raises(MissingAssetError) as exc_info:
        MetadataRegistry(registries_payload, metadata_payload)
    assert "assets.land" in str(exc_info.value)
    assert exc_info.value.key == "land"


@pytest.mark.parametrize("key", ["slot", "passive"])
def test_each_required_asset_is_checked(registries_payload, metadata_payload, key):
    del metadata_payload["assets"][key]
    with pytest.raises(MissingAssetError, match=f"assets.{key}"):
        MetadataRegistry(registries_payload, metadata_payload)


def test_missing_assets_block_fails(registries_payload, metadata_payload):
    del metadata_payload["assets"]
    with pytest.raises(MetadataError, match="assets.land"):
        MetadataRegistry(registries_payload, metadata_payload)


def test_optional_assets_use_defaults(registry):
    assert registry.population.descriptor.label == "Population"
    assert registry.upkeep.descriptor.id == "upkeep"
    assert registry.asset("land").descriptor.icon == "🗺️"


def test_metadata_is_required(registries_payload):
    with pytest.raises(MetadataError):
        MetadataRegistry(registries_payload, None)


def test_malformed_metadata_is_rejected(registries_payload, metadata_payload):
    metadata_payload["phases"] = "not a map"
    with pytest.raises(MetadataError):
        MetadataRegistry(registries_payload, metadata_payload)


def test_registries_are_optional(metadata_payload):
    registry = MetadataRegistry(None, metadata_payload)
    assert registry.buildings.select("castle").label == "Castle"
    assert registry.buildings.select("market").label == "Market"


def test_domain_tables(registry):
    assert registry.buildings.select("castle").icon == "🏰"
    assert registry.buildings.select("market").label == "Market"
    assert registry.developments.select("farm").label == "Farm"
    assert registry.actions.select("tax").label == "Tax"
    assert registry.populations.select("council").label == "Council"
    assert registry.stats.select("absorption").is_percent
    assert registry.stats.select("army_strength").label == "Army Strength"
    assert registry.triggers.select("onBuild").past == "When built"


def test_resource_table_merges_sources(registry):
    gold = registry.resources.select("gold")
    assert gold.label == "Gold"
    assert gold.description == "Shiny coins"
    assert list(registry.resources.by_id)[0] == "resource:core:stat:growth"
    assert registry.resources.select("resource:pop:a").group_id == "group:pop"


def test_resource_group_tables(registry):
    group = registry.resource_groups.select("group:pop")
    assert group.parent_id == "resource:pop:total"
    assert group.children == ("resource:pop:b", "resource:pop:a")
    parent = registry.resource_group_parents.select("resource:pop:total")
    assert parent.label == "Population"
    assert parent.relation == "sumOfAll"


def test_catalog_is_built(registry):
    assert registry.catalog.has("resource:core:happiness")
    assert registry.catalog.parent_of("resource:pop:a").id == "resource:pop:total"


def test_reset_drops_fallbacks(registry):
    first = registry.buildings.select("barracks")
    assert registry.buildings.select("barracks") is first
    registry.reset()
    second = registry.buildings.select("barracks")
    assert second is not first
    assert second == first
