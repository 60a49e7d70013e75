import pytest

from legend.breakdown import BreakdownEngine
from legend.descriptors import FallbackCache
from legend.registry import MetadataRegistry


@pytest.fixture
def registries_payload():
    return {
        "resources": {
            "gold": {"key": "gold", "label": "Gold", "icon": "🪙"},
        },
        "buildings": {
            "castle": {"id": "castle", "name": "Castle", "icon": "🏰"},
        },
        "developments": {
            "farm": {"id": "farm", "name": "Farm", "icon": "🌾"},
        },
        "actions": {
            "tax": {"id": "tax", "name": "Tax", "icon": "💰"},
        },
        "populations": {
            "council": {"id": "council", "name": "Council", "icon": "⚖️"},
        },
        "resourcesV2": [
            {
                "id": "resource:core:happiness",
                "display": {"name": "Happiness", "icon": "😊", "order": 2},
            },
            {
                "id": "resource:core:stat:growth",
                "display": {"name": "Growth", "icon": "📈", "order": 3, "displayAsPercent": True},
            },
            {
                "id": "resource:pop:a",
                "display": {"name": "Alpha", "order": 1},
                "groupId": "group:pop",
            },
            {
                "id": "resource:pop:b",
                "display": {"name": "Beta", "order": 2},
                "groupId": "group:pop",
            },
            {
                "id": "resource:pop:c",
                "display": {"name": "Gamma", "order": 3},
                "groupId": "group:pop",
            },
        ],
        "resourceGroups": [
            {
                "id": "group:pop",
                "order": 1,
                "children": ["resource:pop:b", "resource:pop:a"],
                "parent": {
                    "id": "resource:pop:total",
                    "relation": "sumOfAll",
                    "display": {"name": "Population", "icon": "👥"},
                },
            }
        ],
    }


@pytest.fixture
def metadata_payload():
    return {
        "resources": {
            "gold": {"description": "Shiny coins"},
        },
        "buildings": {
            "market": {"label": "Market", "icon": "🏪"},
        },
        "stats": {
            "army_strength": {"icon": "⚔️"},
            "absorption": {"label": "Absorption", "format": {"percent": True}},
        },
        "phases": {
            "growth": {
                "label": "Growth",
                "icon": "🏗️",
                "steps": [
                    {"id": "gain-income", "title": "Gain Income", "icon": "💰"},
                    {"title": "War Recovery"},
                ],
            },
        },
        "triggers": {
            "onBuild": {"label": "On Build", "icon": "⚒️", "past": "When built"},
            "onUpkeep": {"label": "On Upkeep"},
        },
        "assets": {
            "land": {"label": "Land", "icon": "🗺️"},
            "slot": {"label": "Development Slot", "icon": "🧩"},
            "passive": {"label": "Passive", "icon": "♾️"},
        },
        "orderedResourceIds": ["resource:core:stat:growth"],
    }


@pytest.fixture
def cache():
    return FallbackCache()


@pytest.fixture
def registry(registries_payload, metadata_payload, cache):
    return MetadataRegistry(registries_payload, metadata_payload, cache=cache)


@pytest.fixture
def engine(registry):
    return BreakdownEngine(registry)


@pytest.fixture
def make_source():
    def _make(key, amount=1, longevity="ongoing", kind="building", id="castle", **meta):
        return {
            "amount": amount,
            "meta": {"key": key, "longevity": longevity, "kind": kind, "id": id, **meta},
        }

    return _make
