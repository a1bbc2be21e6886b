"""
Cost Classification

Per-organization split of the cost attributes into hard-dollar and
soft-dollar savings.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.common.exceptions import ShapeError


# The 16 classifiable cost attributes, in display order
COST_ATTRIBUTES = (
    "laborCosts",
    "trainingOnboardingCosts",
    "overtimePremiums",
    "shadowSystemsCosts",
    "turnoverCosts",
    "softwareLicensing",
    "infrastructureCosts",
    "itSupportMaintenance",
    "apiLicensing",
    "errorRemediationCosts",
    "auditComplianceCosts",
    "downtimeCosts",
    "decisionDelays",
    "staffCapacityDrag",
    "customerImpactCosts",
    "slaPenalties",
)


@dataclass
class CostClassification:
    """Hard and soft cost keys for one organization"""
    organization_id: str
    hard_costs: List[str] = field(default_factory=list)
    soft_costs: List[str] = field(default_factory=list)
    last_modified: Optional[str] = None
    modified_by: Optional[str] = None

    @classmethod
    def empty(cls, organization_id: str) -> "CostClassification":
        """Substitute used when the organization has no classification yet"""
        return cls(organization_id=organization_id)

    def is_hard(self, key: str) -> bool:
        return key in self.hard_costs

    def is_soft(self, key: str) -> bool:
        return key in self.soft_costs

    @property
    def has_hard_costs(self) -> bool:
        return len(self.hard_costs) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organizationId": self.organization_id,
            "hardCosts": list(self.hard_costs),
            "softCosts": list(self.soft_costs),
            "lastModified": self.last_modified,
            "modifiedBy": self.modified_by,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], organization_id: Optional[str] = None) -> "CostClassification":
        """
        Build a classification from a storage payload.

        Cost items may be plain keys or objects carrying a ``key`` (or ``id``).
        An absent ``hardCosts``/``softCosts`` key means no items.

        Raises:
            ShapeError: ``hardCosts`` or ``softCosts`` is present but not a list
        """
        return cls(
            organization_id=data.get("organizationId") or organization_id or "",
            hard_costs=_item_keys(data, "hardCosts"),
            soft_costs=_item_keys(data, "softCosts"),
            last_modified=data.get("lastModified"),
            modified_by=data.get("modifiedBy"),
        )


def _item_keys(data: Dict[str, Any], field_name: str) -> List[str]:
    if field_name not in data:
        return []

    items = data[field_name]
    if not isinstance(items, list):
        label = "null" if items is None else type(items).__name__
        raise ShapeError(
            f"'{field_name}' must be a list, got {label}",
            field=field_name,
        )

    keys = []
    for item in items:
        if isinstance(item, str):
            keys.append(item)
        elif isinstance(item, dict):
            key = item.get("key") or item.get("id")
            if key:
                keys.append(str(key))
    return keys
