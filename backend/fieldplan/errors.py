from __future__ import annotations

from fastapi import status


class PlanningError(Exception):
    """Base class for rejected planning commands."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFound(PlanningError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class UnknownTarget(PlanningError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, target_id: str, is_package: bool) -> None:
        kind = "work package" if is_package else "asset"
        super().__init__(f"Target '{target_id}' is not a known {kind}")
        self.target_id = target_id
        self.is_package = is_package


class SlotConflict(PlanningError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, technician_id: str, conflicting_id: str) -> None:
        super().__init__(
            f"Slot for technician '{technician_id}' overlaps assignment '{conflicting_id}'"
        )
        self.technician_id = technician_id
        self.conflicting_id = conflicting_id


class TechnicianInUse(PlanningError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, technician_id: str, assignment_count: int) -> None:
        super().__init__(
            f"Technician '{technician_id}' still has {assignment_count} assignment(s)"
        )
        self.technician_id = technician_id
        self.assignment_count = assignment_count
