"""
Dry-run description of a provisioning run: one PlanAction per pipeline stage,
with will_change taken from the same cache checks the real run uses.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

@dataclass
class PlanAction:
    action: str
    target: str
    detail: str
    paths: Dict[str, str] = field(default_factory=dict)
    will_change: bool = False
    severity: str = "info"  # info|warn|error

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class Plan:
    ok: bool
    actions: List[PlanAction]
    notes: List[str]

    @property
    def pending(self) -> List[str]:
        return [a.action for a in self.actions if a.will_change]

    def get(self, action: str) -> Optional[PlanAction]:
        return next((a for a in self.actions if a.action == action), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "actions": [a.to_dict() for a in self.actions],
            "pending": self.pending,
            "notes": list(self.notes),
        }
