import pytest

from legend.breakdown import BreakdownEngine, SummaryGroup
from legend.config import Settings
from legend.errors import MetadataError, MissingTriggerError
from legend.models import DependencyLink


def _items(group):
    return [line.strip() for line in group.lines()[1:]]


# =============================================================================
# BUCKETING
# =============================================================================


def test_breakdown_has_two_buckets(engine, make_source):
    sources = {
        "ongoing": make_source("ongoing"),
        "permanent": make_source("permanent", longevity="permanent"),
    }
    groups = engine.summarize("resource:core:happiness", sources)
    assert len(groups) == 2
    ongoing, permanent = groups
    assert ongoing.title == "♾️ Ongoing"
    assert any(line.startswith("Ongoing") for line in _items(ongoing))
    assert permanent.title == "Permanent"
    assert "Permanent" in _items(permanent)


def test_only_non_empty_buckets_are_emitted(engine, make_source):
    groups = engine.summarize(
        "resource:core:happiness", {"p": make_source("p", longevity="permanent")}
    )
    assert [group.title for group in groups] == ["Permanent"]
    assert engine.summarize("resource:core:happiness", {}) == []


def test_entries_group_by_origin(engine, make_source):
    sources = {
        "castle-a": make_source("castle-a", amount=1),
        "farm": make_source("farm", kind="development", id="farm"),
        "castle-b": make_source("castle-b", amount=2),
    }
    ongoing = engine.summarize("resource:core:happiness", sources)[0]
    assert [origin.title for origin in ongoing.items] == ["🏰 Castle", "🌾 Farm"]
    assert ongoing.items[0].items == ("+1", "Ongoing", "+2", "Ongoing")


def test_lines_flatten_with_indent():
    group = SummaryGroup("Top", ("a", SummaryGroup("Inner", ("b",))))
    assert group.lines() == ["Top", "  a", "  Inner", "    b"]


# =============================================================================
# ENTRY LINES
# =============================================================================


def test_ongoing_condition_lists_dependencies(engine, make_source):
    source = make_source(
        "farm",
        kind="development",
        id="farm",
        dependsOn=[{"type": "land", "id": "A1"}, {"type": "building", "id": "castle"}],
    )
    origin = engine.summarize("resource:core:happiness", {"farm": source})[0].items[0]
    assert origin.items == (
        "+1",
        "Ongoing as long as 🗺️ Land and 🏰 Castle",
        "Triggered by 🗺️ Land",
        "Triggered by 🏰 Castle",
    )


def test_percent_target(engine, make_source):
    groups = engine.summarize("resource:core:stat:growth", {"g": make_source("g", amount=0.25)})
    assert groups[0].items[0].items[0] == "+25%"
    groups = engine.summarize("absorption", {"g": make_source("g", amount=-0.1)})
    assert groups[0].items[0].items[0] == "-10%"


def test_percent_digits_setting(registry, make_source):
    engine = BreakdownEngine(registry, Settings(percent_digits=0))
    groups = engine.summarize("absorption", {"g": make_source("g", amount=0.123)})
    assert groups[0].items[0].items[0] == "+12%"


def test_removal_lines(engine, make_source):
    removal = {"type": "building", "id": "castle"}
    sources = {
        "o": make_source("o", kind="development", id="farm", removal=removal),
        "p": make_source("p", longevity="permanent", kind="development", id="farm", removal=removal),
    }
    ongoing, permanent = engine.summarize("resource:core:happiness", sources)
    assert "Removed when 🏰 Castle" in _items(ongoing)
    assert "Can be removed when 🏰 Castle" in _items(permanent)


def test_history_lines(engine, make_source):
    source = make_source(
        "tax",
        longevity="permanent",
        kind="action",
        id="tax",
        detail="resolution",
        extra={"turn": 2, "phase": "growth", "step": "gain-income", "trigger": "onBuild"},
    )
    origin = engine.summarize("resource:core:happiness", {"tax": source})[0].items[0]
    assert origin.title == "💰 Tax: Resolution"
    assert origin.items == (
        "+1",
        "Permanent",
        "Triggered by ⚒️ When built",
        "Turn 2 – 🏗️ Growth · 💰 Gain Income",
    )


def test_history_items_and_duplicates(engine, make_source):
    source = make_source(
        "h",
        extra={
            "history": [
                3,
                "Manual note",
                {"turn": 4, "phase": "growth", "step": "gain-income", "description": "Harvest"},
            ],
            "turns": [1, 1],
        },
    )
    origin = engine.summarize("resource:core:happiness", {"h": source})[0].items[0]
    assert origin.items[2:] == (
        "Turn 3",
        "Manual note",
        "Turn 4 – 🏗️ Growth · 💰 Gain Income – Harvest",
        "Turn 1",
    )


def test_unregistered_history_trigger_fails(engine, make_source):
    source = make_source("h", extra={"triggers": ["mystery-trigger"]})
    with pytest.raises(MissingTriggerError, match='Trigger "mystery-trigger" not found in assets'):
        engine.summarize("resource:core:happiness", {"h": source})


# =============================================================================
# ORIGIN TITLES
# =============================================================================


def test_origin_title_detail(engine, make_source):
    sources = {
        "a": make_source("a", detail="castle"),
        "b": make_source("b", kind="development", id="farm", detail="east-wing"),
    }
    titles = [origin.title for origin in engine.summarize("x", sources)[0].items]
    assert titles == ["🏰 Castle", "🌾 Farm · East Wing"]


def test_start_origin(engine, make_source):
    groups = engine.summarize("x", {"s": make_source("s", longevity="permanent", kind="start", id=None)})
    assert groups[0].items[0].title == "[MISSING:start]"


# =============================================================================
# KIND LABELS
# =============================================================================


def test_kind_labels(engine):
    kinds = engine.kinds
    assert kinds.format_kind_label("building", "castle") == "🏰 Castle"
    assert kinds.format_kind_label("land", "A1") == "🗺️ Land"
    assert kinds.format_kind_label("passive") == "♾️ Passive"
    assert kinds.format_kind_label("population", "council") == "⚖️ Council"
    assert kinds.format_kind_label("resource", "resource:core:happiness") == "😊 Happiness"
    assert kinds.format_kind_label("resource", "resource:pop:total") == "👥 Population"
    assert kinds.format_kind_label("phase", "growth") == "🏗️ Growth"
    assert kinds.format_kind_label("start") == "[MISSING:start]"


def test_trigger_kind_uses_past_text(engine):
    assert engine.kinds.format_kind_label("trigger", "onBuild") == "⚒️ When built"
    assert engine.kinds.format_kind_label("trigger", "onUpkeep") == "On Upkeep"


def test_trigger_kind_is_strict(engine):
    with pytest.raises(MissingTriggerError, match='Trigger "mystery-trigger" not found in assets'):
        engine.kinds.format_kind_label("trigger", "mystery-trigger")


def test_missing_kinds_use_cached_placeholder(engine):
    kinds = engine.kinds
    first = kinds.format_kind_label("phase", "mystery-phase")
    assert first == "⚠️ [MISSING:phase:mystery-phase]"
    assert kinds.format_kind_label("phase", "mystery-phase") is first
    assert kinds.format_kind_label("building", "ghost") == "⚠️ [MISSING:building:ghost]"


def test_unknown_kind_is_stable(engine, make_source):
    kinds = engine.kinds
    first = kinds.format_kind_label("mystery", "x")
    assert first == "x"
    assert kinds.format_kind_label("mystery", "x") is first

    link = {"type": "mystery", "id": "x", "detail": "mystery-detail"}
    sources = {"a": make_source("a", dependsOn=[link])}
    first_run = engine.summarize("resource:core:happiness", sources)
    second_run = engine.summarize("resource:core:happiness", sources)
    assert "Triggered by x Mystery Detail" in _items(first_run[0])
    assert first_run == second_run


def test_reset_clears_placeholders(engine):
    first = engine.kinds.resolve("phase", "mystery-phase")
    engine.reset()
    second = engine.kinds.resolve("phase", "mystery-phase")
    assert first is not second
    assert first == second


# =============================================================================
# DEPENDENCIES
# =============================================================================


def test_dependency_values(engine):
    values = {
        "resource:core:happiness": 3,
        "resource:core:stat:growth": 0.25,
        "council": 2,
    }
    happiness = DependencyLink(type="resource", id="resource:core:happiness")
    growth = DependencyLink(type="stat", id="resource:core:stat:growth")
    council = DependencyLink(type="population", id="council")
    assert engine.format_dependency(happiness, values) == "😊 Happiness (3)"
    assert engine.format_dependency(growth, values) == "📈 Growth (25%)"
    assert engine.format_dependency(council, values) == "⚖️ Council ×2"
    assert engine.format_dependency(happiness) == "😊 Happiness"
    assert engine.format_dependency(council, {"council": 0}) == "⚖️ Council"


def test_phase_dependency(engine):
    with_step = DependencyLink(type="phase", id="growth", detail="gain-income")
    assert engine.format_dependency(with_step) == "🏗️ Growth · 💰 Gain Income"
    assert engine.format_dependency(DependencyLink(type="phase", id="growth")) == "🏗️ Growth"


def test_dependency_detail(engine):
    link = DependencyLink(type="building", id="castle", detail="built")
    assert engine.format_dependency(link) == "🏰 Castle Built"


# =============================================================================
# VALIDATION
# =============================================================================


def test_malformed_source_is_rejected(engine):
    with pytest.raises(MetadataError):
        engine.summarize("x", {"bad": {"amount": "lots"}})


def test_dependency_on_same_origin_renders(engine, make_source):
    source = make_source("castle-bonus", dependsOn=[{"type": "building", "id": "castle"}])
    origin = engine.summarize("x", {"castle-bonus": source})[0].items[0]
    assert origin.title == "🏰 Castle"
    assert "Triggered by 🏰 Castle" in origin.items


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_non_finite_amount_is_rejected(engine, make_source, amount):
    with pytest.raises(MetadataError, match="x"):
        engine.summarize("x", {"x": make_source("x", amount=amount)})
