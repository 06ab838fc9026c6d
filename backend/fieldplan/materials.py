from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .hierarchy import AssetHierarchyIndex
from .models import Assignment

MISSING_ARTICLE = "N/A"


@dataclass(slots=True)
class PartRequirement:
    article_number: str
    name: str
    quantity: float
    machine_name: Optional[str] = None


def required_parts(index: AssetHierarchyIndex, assignments: Iterable[Assignment]) -> List[PartRequirement]:
    """Sum part quantities below every scheduled asset, keyed by article number.

    Parts without an article number share the ``N/A`` article but are only
    merged with parts of the same name. Order is first-seen.
    """
    requirements: Dict[Tuple[str, Optional[str]], PartRequirement] = {}
    for assignment in assignments:
        if assignment.is_package:
            continue
        machine = index.find(assignment.entity_id)
        if machine is None:
            continue
        for part in index.collect_descendant_parts(machine.id):
            detail = part.part
            article = detail.article_number if detail and detail.article_number else None
            quantity = detail.quantity if detail and detail.quantity else 1
            key = (article, None) if article else (MISSING_ARTICLE, part.name)
            existing = requirements.get(key)
            if existing is not None:
                existing.quantity += quantity
                continue
            requirements[key] = PartRequirement(
                article_number=article or MISSING_ARTICLE,
                name=part.name,
                quantity=quantity,
                machine_name=machine.name,
            )
    return list(requirements.values())
