"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """Profile role. Closed set; every role check goes through the guard."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class PostingStatus(str, Enum):
    """Posting lifecycle. Only ACTIVE postings accept applications."""

    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    """Application review status.

    PENDING is the only non-terminal state.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_decided(self) -> bool:
        return self is not ApplicationStatus.PENDING


class AttachmentKind(str, Enum):
    """Kinds of uploaded document, each with its own bucket and size ceiling."""

    RESUME = "resume"
    DOCUMENT = "document"
