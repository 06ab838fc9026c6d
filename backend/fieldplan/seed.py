"""Demo dataset loaded at startup when ``FP_SEED_DEMO`` is enabled."""

from __future__ import annotations

import datetime as dt
from typing import List

from .models import (
    Asset,
    Assignment,
    MachineDetail,
    PartDetail,
    PlanningSnapshot,
    ServiceConfig,
    Technician,
    WorkPackage,
)


def demo_assets(today: dt.date) -> List[Asset]:
    return [
        Asset(id="c1", category="customer", name="Müller Produktionstechnik GmbH",
              customer_number="KD-10001", description="Hauptkunde Automotive"),
        Asset(id="s1", parent_id="c1", category="station", name="Werk Berlin", description="Hauptfertigung"),
        Asset(id="ss1", parent_id="s1", category="sub_station", name="Halle 3 (Spritzguss)", description="Nordflügel"),
        Asset(id="bg1", parent_id="ss1", category="assembly", name="Druckluftversorgung Linie A",
              description="Versorgt Spritzgussmaschinen 1-4"),
        Asset(
            id="m1",
            parent_id="bg1",
            category="machine",
            name="Schraubenkompressor GA 37",
            description="Hauptkompressor",
            detail=MachineDetail(
                manufacturer="Atlas Copco",
                model="GA 37",
                serial_number="APP-88221",
                operating_hours=1950,
                next_service_hours=2000,
                last_service_date=today - dt.timedelta(days=365),
                next_service_date=today,
                status="warning",
                service_size="M",
            ),
        ),
        Asset(id="cmp1", parent_id="m1", category="component", name="Filtereinheit", description="Ansaugbereich"),
        Asset(id="art1", parent_id="cmp1", category="part", name="Luftfiltereinsatz C1140",
              detail=PartDetail(article_number="LF-992", manufacturer="Mann+Hummel", quantity=1)),
        Asset(id="art2", parent_id="cmp1", category="part", name="O-Ring Dichtung",
              detail=PartDetail(article_number="OR-55", quantity=2)),
        Asset(
            id="m2",
            parent_id="bg1",
            category="machine",
            name="Kältetrockner TE 141",
            detail=MachineDetail(
                status="ok",
                manufacturer="Kaeser",
                next_service_date=today + dt.timedelta(days=45),
                service_size="S",
            ),
        ),
        Asset(id="c2", category="customer", name="Bäckerei Schmidt", customer_number="KD-10002",
              description="Filialnetz Nord"),
        Asset(id="s2", parent_id="c2", category="station", name="Filiale Hamburg Mitte", description="Backstube"),
        Asset(
            id="m3",
            parent_id="s2",
            category="machine",
            name="Teigteilmaschine Hydr.",
            description="Linie 1",
            detail=MachineDetail(
                status="critical",
                next_service_date=today - dt.timedelta(days=4),
                manufacturer="Diosna",
                service_size="L",
            ),
        ),
        Asset(id="cmp2", parent_id="m3", category="component", name="Hydraulikaggregat", description="Druckaufbau"),
        Asset(id="art3", parent_id="cmp2", category="part", name="Hydraulikfilter H-200",
              detail=PartDetail(article_number="HF-200", quantity=1)),
    ]


def demo_technicians() -> List[Technician]:
    return [
        Technician(id="t1", name="Max Mustermann", role="Meister", location="Berlin",
                   work_day_start=8, work_day_end=17, avatar_color="bg-blue-500"),
        Technician(id="t2", name="Julia Service", role="Elektrik", location="Hamburg",
                   work_day_start=8, work_day_end=16, avatar_color="bg-emerald-500"),
        Technician(id="t3", name="Klaus Montage", role="Mechanik", location="Berlin",
                   work_day_start=7, work_day_end=16, avatar_color="bg-orange-500"),
        Technician(id="t4", name="Ahmet Yilmaz", role="Hydraulik", location="München",
                   work_day_start=9, work_day_end=18, avatar_color="bg-purple-500"),
        Technician(id="t5", name="Sarah Weber", role="Azubi", location="Hamburg",
                   max_hours=6, work_day_start=8, work_day_end=14, avatar_color="bg-pink-500"),
        Technician(id="t6", name="Tom Bross", role="Meister", location="München",
                   work_day_start=10, work_day_end=19, avatar_color="bg-indigo-500"),
    ]


def demo_packages() -> List[WorkPackage]:
    return [
        WorkPackage(id="pkg_1", name="Anfahrt (Pauschale)", duration=1),
        WorkPackage(id="pkg_2", name="Abfahrt / Rüstzeit", duration=0.5),
        WorkPackage(id="pkg_3", name="Nacharbeit / Doku", duration=0.5),
        WorkPackage(id="pkg_4", name="Hotelübernachtung", duration=0),
    ]


def demo_snapshot(today: dt.date, service_config: ServiceConfig | None = None) -> PlanningSnapshot:
    assignments = [
        Assignment(id="past_1", entity_id="m2", technician_id="t1", date=today - dt.timedelta(days=20),
                   duration=2, start_hour=8, status="completed"),
        Assignment(id="future_1", entity_id="m2", technician_id="t3", date=today + dt.timedelta(days=2),
                   duration=2, start_hour=7),
    ]
    return PlanningSnapshot(
        assets=demo_assets(today),
        technicians=demo_technicians(),
        packages=demo_packages(),
        assignments=assignments,
        service_config=service_config or ServiceConfig(),
    )
