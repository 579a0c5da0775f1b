"""Update records accepted by the memory bank."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

DecisionStatus = Literal["Implemented", "Pending", "Revised"]
DECISION_STATUSES: tuple[str, ...] = ("Implemented", "Pending", "Revised")


@dataclass
class ProductContextUpdate:
    project_overview: str | None = None
    goals_and_objectives: str | None = None
    core_features: str | None = None
    architecture_overview: str | None = None


@dataclass
class ActiveContextUpdate:
    current_focus: str | None = None
    recent_changes: str | None = None
    open_questions: str | None = None


@dataclass
class SystemPatternsUpdate:
    architectural_patterns: str | None = None
    design_patterns: str | None = None
    technical_decisions: str | None = None


@dataclass
class Decision:
    """A decision log entry. Once written it is never edited."""

    title: str
    rationale: str
    implications: str
    status: DecisionStatus = "Pending"

    def __post_init__(self) -> None:
        if self.status not in DECISION_STATUSES:
            raise ValueError(
                f"Invalid decision status {self.status!r}; expected one of {DECISION_STATUSES}"
            )


@dataclass
class Milestone:
    title: str
    description: str | None = None


@dataclass
class ProgressUpdate:
    current_tasks: list[str] = field(default_factory=list)
    completed_tasks: list[str] = field(default_factory=list)
    upcoming_tasks: list[str] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)


@dataclass
class MemoryBankUpdate:
    """Everything a single ``umb`` update may touch."""

    product_context: ProductContextUpdate | None = None
    active_context: ActiveContextUpdate | None = None
    system_patterns: SystemPatternsUpdate | None = None
    decision: Decision | None = None
    progress: ProgressUpdate | None = None


@dataclass
class UpdateResult:
    success: bool
    message: str
    updated_files: list[str] = field(default_factory=list)
