"""Project lifecycle status values and their presentation labels."""

from enum import Enum


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    NEEDS_RECALC = "needs_recalc"
    COSTS_READY = "costs_ready"
    COMPLIANT = "compliant"

    @property
    def label(self) -> str:
        """Presentation label shown on project cards."""
        return STATUS_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "ProjectStatus":
        """
        Resolve either the stored value ("needs_recalc") or the
        presentation label ("Needs Re-calc") to a status.

        Raises:
            ValueError: if the value matches neither form
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Status is required")

        normalized = value.strip()
        for status in cls:
            if normalized == status.value:
                return status
        for status, label in STATUS_LABELS.items():
            if normalized.lower() == label.lower():
                return status

        raise ValueError(f"Unknown project status: {value!r}")


STATUS_LABELS = {
    ProjectStatus.DRAFT: "Draft",
    ProjectStatus.NEEDS_RECALC: "Needs Re-calc",
    ProjectStatus.COSTS_READY: "Costs Ready",
    ProjectStatus.COMPLIANT: "Compliant",
}
