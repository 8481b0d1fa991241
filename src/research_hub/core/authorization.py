"""Authorization guard.

Every access decision in the service goes through `authorize()`. It is a pure
function of the caller, the action and freshly loaded resources; it never
touches the database. `enforce()` turns a denial into the matching domain error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from src.research_hub.core.exceptions import (
    Conflict,
    DomainError,
    DuplicateApplication,
    Forbidden,
    Unauthenticated,
    ValidationFailed,
)
from src.research_hub.models import Application, BlogPost, Posting
from src.research_hub.models.enums import PostingStatus, Role


class Principal(Protocol):
    """The resolved caller. `UserProfile` satisfies this."""

    id: UUID
    email: str
    role: str


class Action(str, Enum):
    READ_POSTING = "read_posting"
    LIST_POSTINGS = "list_postings"
    CREATE_POSTING = "create_posting"
    UPDATE_POSTING = "update_posting"
    DELETE_POSTING = "delete_posting"
    CREATE_APPLICATION = "create_application"
    READ_APPLICATION = "read_application"
    UPDATE_APPLICATION_STATUS = "update_application_status"
    DELETE_APPLICATION = "delete_application"
    DOWNLOAD_RESUME = "download_resume"
    UPLOAD_RESUME = "upload_resume"
    UPLOAD_DOCUMENT = "upload_document"
    CREATE_BLOG_POST = "create_blog_post"
    UPDATE_BLOG_POST = "update_blog_post"
    DELETE_BLOG_POST = "delete_blog_post"
    READ_BLOG_POST = "read_blog_post"


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    ROLE = "role"
    OWNERSHIP = "ownership"
    POSTING_NOT_OPEN = "posting_not_open"
    DUPLICATE = "duplicate"
    NOT_PENDING = "not_pending"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)


_ERRORS: dict[DenyReason, type[DomainError]] = {
    DenyReason.UNAUTHENTICATED: Unauthenticated,
    DenyReason.ROLE: Forbidden,
    DenyReason.OWNERSHIP: Forbidden,
    DenyReason.POSTING_NOT_OPEN: ValidationFailed,
    DenyReason.DUPLICATE: DuplicateApplication,
    DenyReason.NOT_PENDING: Conflict,
}

_UNAUTHENTICATED = Decision.deny(DenyReason.UNAUTHENTICATED, "Authentication required")


def _is_admin(principal: Principal) -> bool:
    return principal.role == Role.ADMIN.value


def _require(resource: object | None, action: Action) -> None:
    if resource is None:
        raise ValueError(f"{action.value} requires a loaded resource")


def authorize(
    principal: Principal | None,
    action: Action,
    *,
    posting: Posting | None = None,
    application: Application | None = None,
    blog_post: BlogPost | None = None,
    listing_status: str | None = None,
    already_applied: bool = False,
) -> Decision:
    """Decide whether `principal` may perform `action`.

    Args:
        principal: The resolved caller, or None for anonymous requests.
        action: What the caller is trying to do.
        posting: The posting acted on, or the posting an application belongs to.
        application: The application acted on.
        blog_post: The blog post acted on.
        listing_status: Status filter of a posting listing (None means active).
        already_applied: Whether the caller already has an application for
            `posting`. Only consulted for CREATE_APPLICATION.

    Returns:
        A Decision. Denials carry the reason and a caller-facing message.
    """
    # Public reads
    if action is Action.LIST_POSTINGS:
        if listing_status in (None, PostingStatus.ACTIVE.value):
            return Decision.allow()
        return Decision.allow() if principal is not None else _UNAUTHENTICATED

    if action is Action.READ_POSTING:
        _require(posting, action)
        assert posting is not None
        if posting.status_enum is PostingStatus.ACTIVE:
            return Decision.allow()
        if principal is None:
            return _UNAUTHENTICATED
        if principal.id == posting.author_id or _is_admin(principal):
            return Decision.allow()
        return Decision.deny(DenyReason.OWNERSHIP, "Posting is not published")

    if action is Action.READ_BLOG_POST:
        _require(blog_post, action)
        assert blog_post is not None
        if blog_post.published:
            return Decision.allow()
        if principal is None:
            return _UNAUTHENTICATED
        if principal.id == blog_post.author_id or _is_admin(principal):
            return Decision.allow()
        return Decision.deny(DenyReason.OWNERSHIP, "Blog post is not published")

    if principal is None:
        return _UNAUTHENTICATED

    match action:
        case Action.CREATE_POSTING:
            if principal.role != Role.TEACHER.value:
                return Decision.deny(DenyReason.ROLE, "Only teachers can create postings")
            return Decision.allow()

        case Action.UPDATE_POSTING | Action.DELETE_POSTING:
            _require(posting, action)
            assert posting is not None
            if principal.id != posting.author_id:
                return Decision.deny(
                    DenyReason.OWNERSHIP, "Only the posting owner can modify it"
                )
            return Decision.allow()

        case Action.CREATE_APPLICATION:
            _require(posting, action)
            assert posting is not None
            # Checked before the role so every caller sees the same failure
            if not posting.accepts_applications:
                return Decision.deny(
                    DenyReason.POSTING_NOT_OPEN, "Project is not accepting applications"
                )
            if principal.role != Role.STUDENT.value:
                return Decision.deny(DenyReason.ROLE, "Only students can apply")
            if already_applied:
                return Decision.deny(
                    DenyReason.DUPLICATE, "You have already applied to this project"
                )
            return Decision.allow()

        case Action.READ_APPLICATION:
            _require(application, action)
            assert application is not None
            if (
                principal.id == application.student_id
                or principal.id == application.teacher_id
                or (posting is not None and principal.id == posting.author_id)
                or _is_admin(principal)
            ):
                return Decision.allow()
            return Decision.deny(DenyReason.OWNERSHIP, "Not allowed to view this application")

        case Action.UPDATE_APPLICATION_STATUS:
            _require(application, action)
            _require(posting, action)
            assert application is not None and posting is not None
            if principal.id != posting.author_id:
                return Decision.deny(
                    DenyReason.OWNERSHIP, "Only the posting owner can review applications"
                )
            if application.status_enum.is_decided:
                return Decision.deny(
                    DenyReason.NOT_PENDING,
                    f"Application has already been {application.status}",
                )
            return Decision.allow()

        case Action.DELETE_APPLICATION:
            _require(application, action)
            assert application is not None
            if principal.id != application.student_id:
                return Decision.deny(
                    DenyReason.OWNERSHIP, "Only the applicant can withdraw an application"
                )
            return Decision.allow()

        case Action.DOWNLOAD_RESUME:
            _require(posting, action)
            assert posting is not None
            if principal.role != Role.TEACHER.value:
                return Decision.deny(DenyReason.ROLE, "Only teachers can download resumes")
            if principal.email.lower() != posting.author_email.lower():
                return Decision.deny(
                    DenyReason.OWNERSHIP, "Only the posting owner can download resumes"
                )
            return Decision.allow()

        case Action.UPLOAD_RESUME:
            if principal.role != Role.STUDENT.value:
                return Decision.deny(DenyReason.ROLE, "Only students can upload resumes")
            return Decision.allow()

        case Action.UPLOAD_DOCUMENT | Action.CREATE_BLOG_POST:
            return Decision.allow()

        case Action.UPDATE_BLOG_POST | Action.DELETE_BLOG_POST:
            _require(blog_post, action)
            assert blog_post is not None
            if principal.id != blog_post.author_id:
                return Decision.deny(
                    DenyReason.OWNERSHIP, "Only the author can modify this blog post"
                )
            return Decision.allow()

    raise ValueError(f"Unhandled action: {action}")


def enforce(decision: Decision) -> None:
    """Raise the domain error matching a denial. No-op when allowed."""
    if decision.allowed:
        return
    assert decision.reason is not None
    raise _ERRORS[decision.reason](decision.message)
