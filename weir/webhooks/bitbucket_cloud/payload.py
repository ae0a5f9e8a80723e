"""Bitbucket Cloud webhook payload schema.

Only the fields the normalisers read are declared; msgspec ignores the rest.
Every field is optional. Nested objects default to ``None`` because Bitbucket
sends ``null`` for them (``push.changes[].new`` on a branch delete, for
example), and scalars default to their zero value.

See https://support.atlassian.com/bitbucket-cloud/docs/event-payloads/
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003

import msgspec

from weir.webhooks.errors import MalformedPayloadError


class BitbucketUser(msgspec.Struct, kw_only=True, frozen=True):
    """Account reference; only the handle is used."""

    nickname: str = ""


class BitbucketCommitAuthor(msgspec.Struct, kw_only=True, frozen=True):
    """Commit author as recorded by git, plus the linked account if any.

    Attributes
    ----------
    raw : str
        Author exactly as in the commit, usually ``Name <email>``.
    user : BitbucketUser, optional
        Bitbucket account matched to the author; absent for unknown emails.

    """

    raw: str = ""
    user: BitbucketUser | None = None

    @property
    def nickname(self) -> str:
        """Return the linked account's handle, or ``""``."""
        return self.user.nickname if self.user is not None else ""


class BitbucketLink(msgspec.Struct, kw_only=True, frozen=True):
    """Hyperlink object."""

    href: str = ""


class BitbucketCommitLinks(msgspec.Struct, kw_only=True, frozen=True):
    """Links attached to a commit."""

    html: BitbucketLink | None = None


class BitbucketParent(msgspec.Struct, kw_only=True, frozen=True):
    """Parent commit reference."""

    hash: str = ""


class BitbucketCommit(msgspec.Struct, kw_only=True, frozen=True):
    """Commit a branch points to.

    Attributes
    ----------
    hash : str
        Full commit hash.
    message : str
        Commit message.
    date : datetime, optional
        Commit timestamp.
    author : BitbucketCommitAuthor, optional
        Commit author.
    links : BitbucketCommitLinks, optional
        Web links; ``links.html.href`` is the commit page.
    parents : list[BitbucketParent], optional
        Parent commits, first parent first.

    """

    hash: str = ""
    message: str = ""
    date: dt.datetime | None = None
    author: BitbucketCommitAuthor | None = None
    links: BitbucketCommitLinks | None = None
    parents: list[BitbucketParent] | None = None

    @property
    def author_raw(self) -> str:
        """Return the git author string, or ``""``."""
        return self.author.raw if self.author is not None else ""

    @property
    def author_nickname(self) -> str:
        """Return the author's linked account handle, or ``""``."""
        return self.author.nickname if self.author is not None else ""

    @property
    def html_url(self) -> str:
        """Return the commit's web page, or ``""``."""
        if self.links is None or self.links.html is None:
            return ""
        return self.links.html.href


class BitbucketBranchRef(msgspec.Struct, kw_only=True, frozen=True):
    """Branch state on one side of a push change."""

    name: str = ""
    target: BitbucketCommit | None = None


class BitbucketChange(msgspec.Struct, kw_only=True, frozen=True):
    """A single ref update within a push.

    ``new`` is ``None`` when the branch was deleted and ``old`` is ``None``
    when it was created.
    """

    new: BitbucketBranchRef | None = None
    old: BitbucketBranchRef | None = None

    @property
    def new_name(self) -> str:
        """Return the branch name after the push, or ``""``."""
        return self.new.name if self.new is not None else ""

    @property
    def old_name(self) -> str:
        """Return the branch name before the push, or ``""``."""
        return self.old.name if self.old is not None else ""

    @property
    def head_commit(self) -> BitbucketCommit:
        """Return the commit the branch points to after the push.

        A deleted branch has no head; an empty commit is returned instead.
        """
        if self.new is None or self.new.target is None:
            return BitbucketCommit()
        return self.new.target


class BitbucketPush(msgspec.Struct, kw_only=True, frozen=True):
    """``push`` section of a ``repo:push`` delivery."""

    changes: list[BitbucketChange] | None = None


class BitbucketRepository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository reference."""

    full_name: str = ""


class BitbucketBranch(msgspec.Struct, kw_only=True, frozen=True):
    """Branch reference."""

    name: str = ""


class BitbucketPullRequestEndpoint(msgspec.Struct, kw_only=True, frozen=True):
    """Source or destination of a pull request."""

    repository: BitbucketRepository | None = None
    branch: BitbucketBranch | None = None

    @property
    def full_name(self) -> str:
        """Return the endpoint repository's ``owner/name``, or ``""``."""
        return self.repository.full_name if self.repository is not None else ""

    @property
    def branch_name(self) -> str:
        """Return the endpoint branch name, or ``""``."""
        return self.branch.name if self.branch is not None else ""


class BitbucketPullRequest(msgspec.Struct, kw_only=True, frozen=True):
    """``pullrequest`` section of a pull request delivery."""

    id: int = 0
    source: BitbucketPullRequestEndpoint | None = None
    destination: BitbucketPullRequestEndpoint | None = None
    updated_on: dt.datetime | None = None

    @property
    def source_endpoint(self) -> BitbucketPullRequestEndpoint:
        """Return the source side, or an empty endpoint."""
        if self.source is None:
            return BitbucketPullRequestEndpoint()
        return self.source

    @property
    def destination_endpoint(self) -> BitbucketPullRequestEndpoint:
        """Return the destination side, or an empty endpoint."""
        if self.destination is None:
            return BitbucketPullRequestEndpoint()
        return self.destination


class BitbucketCloudPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Top-level body of a Bitbucket Cloud webhook delivery.

    Each section is ``None`` when absent or ``null``; the properties return
    zero values instead so the normalisers never branch on presence.
    """

    push: BitbucketPush | None = None
    pullrequest: BitbucketPullRequest | None = None
    repository: BitbucketRepository | None = None
    actor: BitbucketUser | None = None

    @property
    def changes(self) -> list[BitbucketChange]:
        """Return ``push.changes``, or an empty list."""
        if self.push is None or self.push.changes is None:
            return []
        return self.push.changes

    @property
    def pull_request(self) -> BitbucketPullRequest:
        """Return the ``pullrequest`` section, or an empty one."""
        if self.pullrequest is None:
            return BitbucketPullRequest()
        return self.pullrequest

    @property
    def repository_full_name(self) -> str:
        """Return ``repository.full_name``, or ``""``."""
        return self.repository.full_name if self.repository is not None else ""

    @property
    def actor_nickname(self) -> str:
        """Return the pushing or acting user's handle, or ``""``."""
        return self.actor.nickname if self.actor is not None else ""


_DECODER = msgspec.json.Decoder(BitbucketCloudPayload)


def decode_payload(payload: bytes) -> BitbucketCloudPayload:
    """Decode a raw delivery body into the Bitbucket Cloud schema.

    Parameters
    ----------
    payload
        Request body bytes.

    Returns
    -------
    BitbucketCloudPayload
        Decoded payload with defaults for every absent field.

    Raises
    ------
    MalformedPayloadError
        If the body is not JSON, is not an object, or a field has the wrong
        type.

    """
    try:
        return _DECODER.decode(payload)
    except msgspec.DecodeError as exc:
        raise MalformedPayloadError.invalid_json(str(exc)) from exc
