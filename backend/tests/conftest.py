from __future__ import annotations

import datetime as dt
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from fieldplan import services
from fieldplan.config import settings
from fieldplan.main import app, get_state
from fieldplan.models import (
    Asset,
    MachineDetail,
    PartDetail,
    PlanningSnapshot,
    ServiceConfig,
    Technician,
    WorkPackage,
)
from fieldplan.state import RuntimeState


@pytest.fixture()
def today() -> dt.date:
    return dt.date(2024, 1, 10)


@pytest.fixture()
def snapshot(today: dt.date) -> PlanningSnapshot:
    assets = [
        Asset(id="c1", category="customer", name="Müller Produktionstechnik GmbH", customer_number="KD-10001"),
        Asset(id="s1", parent_id="c1", category="station", name="Werk Berlin"),
        Asset(
            id="m1",
            parent_id="s1",
            category="machine",
            name="Schraubenkompressor GA 37",
            detail=MachineDetail(status="warning", next_service_date=today, service_size="M"),
        ),
        Asset(id="cmp1", parent_id="m1", category="component", name="Filtereinheit"),
        Asset(id="art1", parent_id="cmp1", category="part", name="Luftfiltereinsatz C1140",
              detail=PartDetail(article_number="LF-992", quantity=1)),
        Asset(id="art2", parent_id="cmp1", category="part", name="O-Ring Dichtung",
              detail=PartDetail(article_number="OR-55", quantity=2)),
        Asset(
            id="m2",
            parent_id="s1",
            category="machine",
            name="Kältetrockner TE 141",
            detail=MachineDetail(status="ok", next_service_date=dt.date(2024, 3, 1), service_size="S"),
        ),
        Asset(id="c2", category="customer", name="Bäckerei Schmidt", customer_number="KD-10002"),
        Asset(
            id="m3",
            parent_id="c2",
            category="machine",
            name="Teigteilmaschine Hydr.",
            detail=MachineDetail(status="critical", next_service_date=dt.date(2024, 1, 6), service_size="L"),
        ),
        Asset(id="cmp2", parent_id="m3", category="component", name="Hydraulikaggregat"),
        Asset(id="art3", parent_id="cmp2", category="part", name="Hydraulikfilter H-200",
              detail=PartDetail(article_number="HF-200", quantity=1)),
        Asset(id="art4", parent_id="cmp2", category="part", name="Luftfiltereinsatz C1140",
              detail=PartDetail(article_number="LF-992", quantity=2)),
        Asset(
            id="m4",
            parent_id="c2",
            category="machine",
            name="Ofen Etage 2",
            detail=MachineDetail(status="critical"),
        ),
        Asset(
            id="m5",
            parent_id="c2",
            category="machine",
            name="Kühlzelle",
            detail=MachineDetail(status="ok"),
        ),
    ]
    technicians = [
        Technician(id="t1", name="Max Mustermann", role="Meister", location="Berlin",
                   work_day_start=8, work_day_end=17),
        Technician(id="t2", name="Julia Service", role="Elektrik", location="Hamburg",
                   work_day_start=8, work_day_end=16),
        Technician(id="t3", name="Ahmet Yilmaz", role="Hydraulik", location="München",
                   work_day_start=9, work_day_end=18),
    ]
    packages = [
        WorkPackage(id="pkg_1", name="Anfahrt (Pauschale)", duration=1),
        WorkPackage(id="pkg_4", name="Hotelübernachtung", duration=0),
    ]
    return PlanningSnapshot(
        assets=assets,
        technicians=technicians,
        packages=packages,
        assignments=[],
        service_config=ServiceConfig(s=2, m=4, l=8),
    )


@pytest.fixture()
def state(snapshot: PlanningSnapshot) -> RuntimeState:
    return RuntimeState(settings, snapshot)


@pytest.fixture(scope="function")
def client(state: RuntimeState, today: dt.date, monkeypatch) -> Generator[TestClient, None, None]:
    monkeypatch.setattr(services, "_today", lambda _state: today)
    app.dependency_overrides[get_state] = lambda: state
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
