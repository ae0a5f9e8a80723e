"""Derived fields for Bitbucket Cloud push events.

Each helper is a pure function of decoded payload parts so it can be tested
without a request.
"""

from __future__ import annotations

import typing as typ
from email import errors as email_errors
from email import policy

from weir.common.slug import split_repo_full_name
from weir.webhooks.errors import MalformedPayloadError
from weir.webhooks.models import RepositoryDetails
from weir.webhooks.validation import branch_status

if typ.TYPE_CHECKING:
    from weir.webhooks.bitbucket_cloud.payload import BitbucketChange, BitbucketCommit
    from weir.webhooks.models import BranchStatus

BITBUCKET_BASE_URL = "https://bitbucket.org"


def repository_details(full_name: str, *, field: str) -> RepositoryDetails:
    """Split a payload ``full_name`` into owner and name.

    Raises
    ------
    MalformedPayloadError
        If ``full_name`` is not in ``owner/name`` form; ``field`` names the
        payload path it came from.

    """
    try:
        owner, name = split_repo_full_name(full_name)
    except ValueError as exc:
        raise MalformedPayloadError.invalid_full_name(full_name, field=field) from exc
    return RepositoryDetails(owner=owner, name=name)


def branch_name(change: BitbucketChange) -> str:
    """Return the pushed branch name, using the old side for deletions."""
    return change.new_name or change.old_name


def change_branch_status(change: BitbucketChange) -> BranchStatus:
    """Classify ``change`` as a created, updated, or deleted branch."""
    return branch_status(
        existed_before=bool(change.old_name),
        exists_after=bool(change.new_name),
    )


def parent_hash(commit: BitbucketCommit) -> str:
    """Return the first parent's hash, or ``""`` for a root or empty commit."""
    if not commit.parents:
        return ""
    return commit.parents[0].hash


def resolve_login(commit: BitbucketCommit, actor_nickname: str) -> str:
    """Prefer the commit author's Bitbucket handle over the pushing actor's."""
    return commit.author_nickname or actor_nickname


def extract_email(raw_author: str) -> str:
    """Extract the address from a ``Name <email>`` author string.

    Strings without a recognisable address are returned unchanged.

    Examples
    --------
    >>> extract_email("Jane Doe <jane@example.com>")
    'jane@example.com'
    >>> extract_email("not-an-email")
    'not-an-email'

    """
    try:
        header = policy.strict.header_factory("From", raw_author)
    except email_errors.HeaderParseError:
        return raw_author
    if header.defects or len(header.addresses) != 1:
        return raw_author

    address = header.addresses[0].addr_spec
    local, sep, domain = address.rpartition("@")
    # The parser repairs some inputs; only an address found verbatim counts.
    if not sep or not local or not domain or address not in raw_author:
        return raw_author
    return address


def compare_url(full_name: str, head_hash: str, prior_hash: str) -> str:
    """Build the Bitbucket diff link between two commits.

    Returns ``""`` unless both hashes are known.
    """
    if not head_hash or not prior_hash:
        return ""
    return (
        f"{BITBUCKET_BASE_URL}/{full_name}/branches/compare/"
        f"{head_hash}..{prior_hash}#diff"
    )
