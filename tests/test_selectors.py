import pytest

from legend.descriptors import (
    build_registry_descriptors,
    build_trigger_descriptors,
    resolve_asset_descriptor,
)
from legend.errors import MissingTriggerError
from legend.models import ContentDefinition, TriggerMetadata
from legend.selectors import AssetSelector, TriggerSelector, create_selector


@pytest.fixture
def selector(cache):
    table = build_registry_descriptors(
        {"castle": ContentDefinition(name="Castle"), "farm": ContentDefinition(name="Farm")},
        namespace="buildings",
        cache=cache,
    )
    return create_selector(table)


@pytest.fixture
def triggers(cache):
    return TriggerSelector(
        build_trigger_descriptors({"onBuild": TriggerMetadata(label="On Build")}, cache=cache)
    )


def test_select_is_reference_stable(selector):
    assert selector.select("castle") is selector.select("castle")
    assert selector.select("ghost") is selector.select("ghost")


def test_select_many_uses_select(selector):
    many = selector.select_many(["castle", "castle", "ghost"])
    assert isinstance(many, tuple)
    assert many[0] is selector.select("castle")
    assert many[1] is many[0]
    assert many[2] is selector.select("ghost")


def test_select_record_uses_select(selector):
    record = selector.select_record(["farm", "ghost"])
    assert record["farm"] is selector.select("farm")
    assert record["ghost"] is selector.select("ghost")
    with pytest.raises(TypeError):
        record["castle"] = selector.select("castle")


def test_by_id_and_list_cover_known_ids(selector):
    selector.select("ghost")
    assert list(selector.by_id) == ["castle", "farm"]
    assert [descriptor.label for descriptor in selector.list] == ["Castle", "Farm"]
    assert selector.has("castle")
    assert not selector.has("ghost")


def test_trigger_selector_is_strict(triggers):
    assert triggers.select("onBuild").label == "On Build"
    with pytest.raises(MissingTriggerError, match='Trigger "missing-trigger" is missing a label'):
        triggers.select("missing-trigger")


def test_trigger_selector_error_is_a_key_error(triggers):
    with pytest.raises(KeyError):
        triggers.select_many(["onBuild", "nope"])


def test_asset_selector():
    selector = AssetSelector(resolve_asset_descriptor("passive", None))
    assert selector.select() is selector.descriptor
    assert selector.select().label == "Passive"
