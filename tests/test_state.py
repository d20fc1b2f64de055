import pytest

from essai_cp.core import Schema
from essai_cp.loader import DBSource
from essai_cp.state import ClassFilter, FamilyFilter, ViewState, passes

from .conftest import StubLoader, make_item


def names(state):
    return [item.name for _, item in state.visible_items()]


@pytest.fixture
def state(stub_loader):
    return ViewState(stub_loader)


def test_passes_search_is_case_insensitive():
    item = make_item(name="Ball Nose EM")
    assert passes(item, None, None, "")
    assert passes(item, None, None, "nose")
    assert passes(item, None, None, "BALL")
    assert not passes(item, None, None, "drill")


def test_passes_manufacturer_filter():
    item = make_item(name="A", milling={"Message3": "Harvey"})
    assert passes(item, "Harvey", None, "")
    assert not passes(item, "Guhring", None, "")


def test_manufacturer_rejection_wins_over_tool_filter():
    item = make_item(milling={"Message2": "P1", "Message3": "Harvey"})
    assert FamilyFilter("P1").accepts(item)
    assert not passes(item, "Guhring", FamilyFilter("P1"), "")


def test_tool_filter_ignores_search_text():
    item = make_item(name="End Mill", milling={"Message2": "P1", "HolderName": "H"})
    assert passes(item, None, FamilyFilter("P1"), "no match")
    assert not passes(item, None, FamilyFilter("P2"), "End")
    assert passes(item, None, ClassFilter("P1", "H"), "")
    assert not passes(item, None, ClassFilter("P1", "other"), "")


def test_initial_state(state, stub_loader):
    assert stub_loader.calls == [DBSource.ONLINE]
    assert state.source is DBSource.ONLINE
    assert len(state.items) == 4
    assert state.manufacturers == ("Guhring", "Harvey")
    assert state.selected is None
    assert state.active_tab is Schema.SOLFEX
    assert not state.load_failed
    assert names(state) == ["T1 Drill", "T2 End Mill", "T3 Chamfer", "T4 Spot"]


def test_initial_source_is_a_parameter(stub_loader):
    state = ViewState(stub_loader, source=DBSource.LOCAL)
    assert stub_loader.calls == [DBSource.LOCAL]
    assert state.items == ()
    assert state.load_failed


def test_deferred_load(stub_loader):
    state = ViewState(stub_loader, load_now=False)
    assert stub_loader.calls == []
    assert state.last_result is None
    assert not state.load_failed


def test_select_toggles(state):
    state.select(1)
    assert state.selected == 1
    assert state.selected_item().name == "T2 End Mill"
    state.select(1)
    assert state.selected is None
    state.select(2)
    state.select(99)
    assert state.selected == 2


def test_reload_clears_selection_and_filters(state, stub_loader):
    state.select(2)
    state.set_manufacturer_filter("Harvey")
    state.filter_by_family(0)
    state.set_search("end")
    state.reload()
    assert state.selected is None
    assert state.manufacturer_filter is None
    assert state.tool_filter is None
    assert state.search == "end"
    assert len(stub_loader.calls) == 2


def test_reload_replaces_catalog(stub_loader):
    state = ViewState(stub_loader)
    old_catalog = state.catalog
    stub_loader.results[DBSource.ONLINE] = [make_item(name="Only", solfex={"Q": 1})]
    state.reload()
    assert state.catalog is not old_catalog
    assert [item.name for item in state.items] == ["Only"]
    assert state.catalog.keys[Schema.SOLFEX] == ["Q"]
    assert state.catalog.keys[Schema.MILLING] == []
    assert state.manufacturers == ()


def test_set_source_local_warns_and_reloads(state, stub_loader):
    state.set_source(DBSource.LOCAL)
    assert state.source is DBSource.LOCAL
    assert state.show_local_warning
    assert stub_loader.calls == [DBSource.ONLINE, DBSource.LOCAL]
    assert state.items == ()
    assert state.load_failed
    state.acknowledge_local_warning()
    assert not state.show_local_warning


def test_set_same_source_does_not_reload(state, stub_loader):
    state.select(0)
    state.set_source(DBSource.ONLINE)
    assert stub_loader.calls == [DBSource.ONLINE]
    assert not state.show_local_warning
    assert state.selected == 0


def test_search(state):
    state.set_search("END")
    assert names(state) == ["T2 End Mill"]
    state.set_search("")
    assert len(names(state)) == 4


def test_manufacturer_filter(state):
    state.set_manufacturer_filter("Harvey")
    assert names(state) == ["T2 End Mill", "T3 Chamfer"]
    assert state.manufacturer_label() == "Manufacturer: Harvey"
    state.set_manufacturer_filter(None)
    assert state.manufacturer_label() is None
    assert len(names(state)) == 4


def test_family_filter(state):
    state.set_search("T4")
    state.filter_by_family(0)
    assert state.tool_filter == FamilyFilter("P-100")
    assert state.tool_filter_label() == "Family: P-100"
    assert names(state) == ["T1 Drill", "T2 End Mill", "T3 Chamfer"]
    state.clear_tool_filter()
    assert state.tool_filter_label() is None
    assert names(state) == ["T4 Spot"]


def test_class_filter(state):
    state.filter_by_class(1)
    assert state.tool_filter_label() == "Class: P-100 | H1"
    assert names(state) == ["T1 Drill", "T2 End Mill"]


def test_class_filter_combined_with_manufacturer(state):
    state.filter_by_class(1)
    state.set_manufacturer_filter("Harvey")
    assert names(state) == ["T2 End Mill"]


def test_tool_filter_needs_essai_part(stub_loader):
    stub_loader.results[DBSource.ONLINE] = [make_item(name="NoPart", milling={"HolderName": "H"})]
    state = ViewState(stub_loader)
    state.filter_by_family(0)
    state.filter_by_class(0)
    state.filter_by_family(5)
    assert state.tool_filter is None


def test_schema_table_uses_global_keys(state):
    assert state.schema_table() == [("A", ""), ("B", ""), ("C", "")]
    state.select(0)
    assert state.schema_table() == [("A", "1"), ("B", "x"), ("C", "")]
    state.select(1)
    assert state.schema_table() == [("A", ""), ("B", "y"), ("C", "true")]
    state.select(2)
    assert state.schema_table(Schema.SOLFEX) == [("A", ""), ("B", ""), ("C", "")]


def test_active_tab(state):
    state.set_active_tab(Schema.DRILLING)
    assert state.active_keys() == ["Diameter", "Length", "Message2", "Message3", "PointAngle"]
    state.select(1)
    assert state.schema_table() == [("Diameter", "0.25"), ("Length", ""), ("Message2", ""),
                                    ("Message3", ""), ("PointAngle", "140")]


def test_detail_groups(state):
    assert state.detail_groups() == []
    state.select(0)
    groups = dict(state.detail_groups())
    assert list(groups) == ["Assembly Details", "Tool Details", "Tool Details Extended"]
    assert groups["Assembly Details"] == [
        ("Tool Name", "T1 Drill"),
        ("Holder", "H1"),
        ("Outside Holder L", "10"),
        ("Gage Length", ""),
    ]
    assert groups["Tool Details"] == [
        ("Essai Part #", "P-100"),
        ("Manufacturer", "Guhring"),
        ("EDP #", ""),
    ]
