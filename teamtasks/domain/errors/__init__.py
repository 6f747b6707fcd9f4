"""Domain errors for Team Tasks.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from TeamTasksError through one kind base:
NotFoundError, ForbiddenError, BadRequestError, ConflictError,
InvalidInviteTokenError, or InfrastructureError.
"""

from teamtasks.domain.errors.assignment import (
    AssigneeNotFoundError,
    AssigneeNotInTeamError,
    AssignmentForbiddenError,
    AssignmentPrecondition,
    AssignmentTeamNotFoundError,
    NoSharedTeamError,
    PersonalTaskReassignmentError,
    TeamAccessDeniedError,
)
from teamtasks.domain.errors.invite import (
    INVALID_INVITE_MESSAGE,
    InvalidInviteTokenError,
    InviteNotAuthorizedError,
)
from teamtasks.domain.errors.kinds import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    StorageTimeoutError,
    StorageUnavailableError,
)
from teamtasks.domain.errors.membership import (
    AdminHasNoTeamError,
    EmailAlreadyRegisteredError,
    MemberHasTeamTasksError,
    RegistrationValidationError,
    TeamHasTasksError,
    TeamManagementForbiddenError,
    TeamValidationError,
    UserAccessDeniedError,
    UserCreationForbiddenError,
    UserDeletionForbiddenError,
    UserStillOwnsTeamError,
)
from teamtasks.domain.errors.not_found import (
    TaskNotFoundError,
    TeamNotFoundError,
    UserNotFoundError,
)
from teamtasks.domain.errors.task import (
    InvalidProgressError,
    InvalidTaskFieldError,
    PersonalTaskInvariantError,
    TaskAccessDeniedError,
)
from teamtasks.domain.exceptions import ErrorKind, TeamTasksError

__all__: list[str] = [
    "AdminHasNoTeamError",
    "AssigneeNotFoundError",
    "AssigneeNotInTeamError",
    "AssignmentForbiddenError",
    "AssignmentPrecondition",
    "AssignmentTeamNotFoundError",
    "BadRequestError",
    "ConflictError",
    "EmailAlreadyRegisteredError",
    "ErrorKind",
    "ForbiddenError",
    "INVALID_INVITE_MESSAGE",
    "InfrastructureError",
    "InvalidInviteTokenError",
    "InvalidProgressError",
    "InvalidTaskFieldError",
    "InviteNotAuthorizedError",
    "MemberHasTeamTasksError",
    "NoSharedTeamError",
    "NotFoundError",
    "PersonalTaskInvariantError",
    "PersonalTaskReassignmentError",
    "RegistrationValidationError",
    "StorageTimeoutError",
    "StorageUnavailableError",
    "TaskAccessDeniedError",
    "TaskNotFoundError",
    "TeamAccessDeniedError",
    "TeamHasTasksError",
    "TeamManagementForbiddenError",
    "TeamNotFoundError",
    "TeamTasksError",
    "TeamValidationError",
    "UserAccessDeniedError",
    "UserCreationForbiddenError",
    "UserDeletionForbiddenError",
    "UserNotFoundError",
    "UserStillOwnsTeamError",
]
