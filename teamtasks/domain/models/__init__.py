"""Domain models for Team Tasks."""

from teamtasks.domain.models.invite_token import (
    InviteGrant,
    InviteToken,
    InviteTokenRejection,
    InviteTokenStats,
    InviteTokenSummary,
)
from teamtasks.domain.models.task import (
    MAX_PROGRESS,
    MIN_PROGRESS,
    Task,
    TaskPriority,
    TaskStatus,
    Todo,
)
from teamtasks.domain.models.task_patch import (
    UNSET,
    ChecklistItem,
    TaskDraft,
    TaskPatch,
    is_set,
)
from teamtasks.domain.models.team import Team, default_team_for
from teamtasks.domain.models.user import Actor, User, UserRole, normalize_email

__all__: list[str] = [
    "Actor",
    "ChecklistItem",
    "InviteGrant",
    "InviteToken",
    "InviteTokenRejection",
    "InviteTokenStats",
    "InviteTokenSummary",
    "MAX_PROGRESS",
    "MIN_PROGRESS",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskPriority",
    "TaskStatus",
    "Team",
    "Todo",
    "UNSET",
    "User",
    "UserRole",
    "default_team_for",
    "is_set",
    "normalize_email",
]
