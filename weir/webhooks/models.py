"""Provider-agnostic webhook event records.

``WebhookInfo`` is what every provider parser produces. Fields a provider
cannot fill keep their zero value, so consumers never need to check for
``None`` except on ``branch_status``, which only push events carry.
"""

from __future__ import annotations

import enum

import msgspec

from weir.common.slug import repo_full_name


class WebhookEvent(enum.StrEnum):
    """Canonical kinds of webhook event."""

    PUSH = "push"
    PR_OPENED = "pr_opened"
    PR_EDITED = "pr_edited"
    PR_MERGED = "pr_merged"
    PR_REJECTED = "pr_rejected"


class BranchStatus(enum.StrEnum):
    """Lifecycle of a branch reference within a push."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class RepositoryDetails(msgspec.Struct, kw_only=True, frozen=True):
    """Repository identity split from an ``owner/name`` full name.

    Attributes
    ----------
    owner
        Workspace or organisation slug.
    name
        Repository slug.

    """

    owner: str = ""
    name: str = ""

    @property
    def full_name(self) -> str:
        """Return the ``owner/name`` identifier, or ``""`` when unset."""
        if not self.owner and not self.name:
            return ""
        return repo_full_name(self.owner, self.name)


class CommitInfo(msgspec.Struct, kw_only=True, frozen=True):
    """Commit reference carried by push events."""

    hash: str = ""
    message: str = ""
    url: str = ""


class UserInfo(msgspec.Struct, kw_only=True, frozen=True):
    """Identity of an actor, committer, or author."""

    login: str = ""
    display_name: str = ""
    email: str = ""
    avatar_url: str = ""


class WebhookInfo(msgspec.Struct, kw_only=True, frozen=True):
    """Canonical record produced from a single webhook delivery.

    Attributes
    ----------
    event
        Canonical event kind.
    target_repository_details
        Repository receiving the push, or the pull request's destination.
    target_branch
        Branch receiving the push, or the pull request's destination branch.
    source_repository_details
        Pull request source repository; empty for pushes.
    source_branch
        Pull request source branch; empty for pushes.
    pull_request_id
        Pull request number; ``0`` for pushes.
    timestamp
        Unix seconds (UTC) of the head commit or pull request update.
    commit
        Head commit after a push.
    before_commit
        Parent of the head commit (hash only); push only.
    branch_status
        Branch lifecycle for pushes; ``None`` for pull request events.
    triggered_by
        Actor that caused the delivery.
    committer
        Committer of the head commit.
    author
        Author of the head commit.
    compare_url
        Link to a diff between the head and prior commits, or ``""``.

    """

    event: WebhookEvent
    target_repository_details: RepositoryDetails = msgspec.field(
        default_factory=RepositoryDetails
    )
    target_branch: str = ""
    source_repository_details: RepositoryDetails = msgspec.field(
        default_factory=RepositoryDetails
    )
    source_branch: str = ""
    pull_request_id: int = 0
    timestamp: int = 0
    commit: CommitInfo = msgspec.field(default_factory=CommitInfo)
    before_commit: CommitInfo = msgspec.field(default_factory=CommitInfo)
    branch_status: BranchStatus | None = None
    triggered_by: UserInfo = msgspec.field(default_factory=UserInfo)
    committer: UserInfo = msgspec.field(default_factory=UserInfo)
    author: UserInfo = msgspec.field(default_factory=UserInfo)
    compare_url: str = ""


__all__ = [
    "BranchStatus",
    "CommitInfo",
    "RepositoryDetails",
    "UserInfo",
    "WebhookEvent",
    "WebhookInfo",
]
