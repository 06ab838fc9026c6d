from __future__ import annotations

import datetime as dt

from fieldplan.hierarchy import AssetHierarchyIndex
from fieldplan.materials import MISSING_ARTICLE, required_parts
from fieldplan.models import Asset, Assignment, PartDetail, PlanningSnapshot
from fieldplan.reports import utilisation

DAY = dt.date(2024, 1, 10)


def _assignment(entity_id: str, **kwargs) -> Assignment:
    values = dict(id=f"a_{entity_id}", entity_id=entity_id, technician_id="t1", date=DAY, duration=4, start_hour=8)
    values.update(kwargs)
    return Assignment(**values)


def test_parts_aggregate_by_article_number(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    parts = required_parts(index, [_assignment("m1"), _assignment("m3")])
    assert [(p.article_number, p.quantity) for p in parts] == [("LF-992", 3), ("OR-55", 2), ("HF-200", 1)]
    assert parts[0].machine_name == "Schraubenkompressor GA 37"


def test_packages_and_partless_machines_contribute_nothing(snapshot: PlanningSnapshot):
    index = AssetHierarchyIndex(snapshot.assets)
    assignments = [
        _assignment("pkg_1", is_package=True, custom_name="Anfahrt (Pauschale)"),
        _assignment("m4"),
        _assignment("deleted-machine"),
    ]
    assert required_parts(index, assignments) == []


def test_missing_article_numbers_merge_by_name():
    assets = [
        Asset(id="m", category="machine", name="Presse"),
        Asset(id="p1", parent_id="m", category="part", name="Schraube", detail=PartDetail(quantity=4)),
        Asset(id="p2", parent_id="m", category="part", name="Mutter"),
        Asset(id="p3", parent_id="m", category="part", name="Schraube", detail=PartDetail(quantity=2)),
    ]
    parts = required_parts(AssetHierarchyIndex(assets), [_assignment("m")])
    assert [(p.article_number, p.name, p.quantity) for p in parts] == [
        (MISSING_ARTICLE, "Schraube", 6),
        (MISSING_ARTICLE, "Mutter", 1),
    ]


def test_zero_quantity_counts_as_one():
    assets = [
        Asset(id="m", category="machine", name="Presse"),
        Asset(id="p", parent_id="m", category="part", name="Dichtung",
              detail=PartDetail(article_number="D-1", quantity=0)),
    ]
    parts = required_parts(AssetHierarchyIndex(assets), [_assignment("m"), _assignment("m", id="again")])
    assert parts[0].quantity == 2


def test_utilisation_caps_at_full_week(snapshot: PlanningSnapshot):
    assignments = [
        _assignment("m3", id="a1", duration=8),
        _assignment("m3", id="a2", duration=8, technician_id="t2"),
        _assignment("m3", id="a3", duration=40, technician_id="t2"),
        _assignment("m1", id="old", date=DAY - dt.timedelta(days=60)),
    ]
    report = utilisation(assignments, snapshot.technicians, DAY - dt.timedelta(days=7), DAY)
    assert report.total_assignments == 3
    assert report.total_hours == 56
    assert report.active_technicians == 3
    loads = {load.technician_id: load for load in report.technicians}
    assert loads["t1"].utilisation == 20
    assert loads["t2"].utilisation == 100
    assert loads["t3"].count == 0
    assert loads["t3"].utilisation == 0
