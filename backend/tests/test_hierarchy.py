from __future__ import annotations

import datetime as dt

import pytest

from fieldplan.errors import NotFound
from fieldplan.hierarchy import AssetHierarchyIndex
from fieldplan.models import Asset, MachineDetail, PartDetail, PlanningSnapshot, detail_for
from fieldplan.seed import demo_snapshot


def test_children_keep_store_order(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assert [a.id for a in index.children_of("s1")] == ["m1", "m2"]
    assert [a.id for a in index.children_of("c2")] == ["m3", "m4", "m5"]
    assert index.children_of("art1") == []


def test_roots_are_children_of_none(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assert [a.id for a in index.children_of(None)] == ["c1", "c2"]


def test_breadcrumb_path_from_root(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    path = index.breadcrumb_path("art2")
    assert [a.id for a in path] == ["c1", "s1", "m1", "cmp1", "art2"]
    assert [a.id for a in index.breadcrumb_path("c1")] == ["c1"]


def test_breadcrumb_path_unknown_id(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    with pytest.raises(NotFound):
        index.breadcrumb_path("nope")


def test_dangling_parent_is_treated_as_root():
    index = AssetHierarchyIndex([Asset(id="x", category="station", name="Lost", parent_id="gone")])
    assert [a.id for a in index.children_of(None)] == ["x"]
    assert [a.id for a in index.breadcrumb_path("x")] == ["x"]


def test_collect_descendant_parts_skips_intermediate_nodes(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assert [p.id for p in index.collect_descendant_parts("m1")] == ["art1", "art2"]
    assert [p.id for p in index.collect_descendant_parts("c1")] == ["art1", "art2"]
    assert index.collect_descendant_parts("m4") == []


def test_parts_below_parts_are_not_collected():
    assets = [
        Asset(id="m", category="machine", name="M"),
        Asset(id="p", parent_id="m", category="part", name="Kit", detail=PartDetail(article_number="K-1")),
        Asset(id="pp", parent_id="p", category="part", name="Inner", detail=PartDetail(article_number="K-2")),
    ]
    index = AssetHierarchyIndex(assets)
    assert [p.id for p in index.collect_descendant_parts("m")] == ["p"]


def test_search_by_customer_number_at_root(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assert [a.id for a in index.search("kd-10002")] == ["c2"]
    assert [a.id for a in index.search("müller")] == ["c1"]
    assert [a.id for a in index.search("kälte", parent_id="s1")] == ["m2"]
    assert [a.id for a in index.search("  ", parent_id="s1")] == ["m1", "m2"]


def test_get_and_machines(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assert index.get("m3").name == "Teigteilmaschine Hydr."
    assert "m3" in index
    assert [a.id for a in index.machines()] == ["m1", "m2", "m3", "m4", "m5"]
    assert index.parent_of("m3").id == "c2"


def test_demo_data_is_consistent():
    today = dt.date(2024, 1, 10)
    snapshot = demo_snapshot(today)
    ids = {a.id for a in snapshot.assets}
    assert all(a.parent_id is None or a.parent_id in ids for a in snapshot.assets)
    technician_ids = {t.id for t in snapshot.technicians}
    assert all(a.technician_id in technician_ids for a in snapshot.assignments)
    assert all(a.entity_id in ids for a in snapshot.assignments if not a.is_package)
    index = AssetHierarchyIndex(snapshot.assets)
    assert [a.id for a in index.breadcrumb_path("art1")][0] == "c1"


def test_detail_for_validates_before_building():
    assert detail_for("customer", {"status": "critical"}) is None
    assert detail_for("machine", {"status": "ok", "article_number": "X"}) == MachineDetail(status="ok")
    assert detail_for("part", {"quantity": 2, "status": "ok"}) == PartDetail(quantity=2)
    with pytest.raises(ValueError):
        detail_for("machine", {"status": "broken"})
    with pytest.raises(ValueError):
        detail_for("machine", {"next_service_date": "31.12.2024"})
    with pytest.raises(ValueError):
        detail_for("part", {"quantity": "viele"})


def test_failed_detail_merge_keeps_current_detail(snapshot: PlanningSnapshot):
    machine = AssetHierarchyIndex(snapshot.assets).get("m1")
    with pytest.raises(ValueError):
        machine.update_detail({"service_size": "XL"})
    assert machine.machine.service_size == "M"
    assert machine.merged_detail({"service_size": "L"}).service_size == "L"
    assert machine.machine.service_size == "M"
