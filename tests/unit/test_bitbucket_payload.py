"""Unit tests for decoding Bitbucket Cloud webhook bodies."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest

from tests.helpers.bitbucket_payloads import (
    COMMIT_EPOCH,
    HEAD_HASH,
    PARENT_HASH,
    encode,
    pull_request_payload,
    push_payload,
)
from weir.webhooks.bitbucket_cloud.payload import BitbucketCommit, decode_payload
from weir.webhooks.errors import MalformedPayloadError


def test_decodes_push_change_and_commit() -> None:
    """Nested push fields land on the typed structures."""
    hook = decode_payload(encode(push_payload()))

    change = hook.changes[0]
    commit = change.head_commit
    assert change.new_name == "main"
    assert change.old_name == "main"
    assert commit.hash == HEAD_HASH
    assert commit.parents is not None
    assert commit.parents[0].hash == PARENT_HASH
    assert commit.author_nickname == "jdoe"
    assert commit.html_url.endswith(f"/commits/{HEAD_HASH}")
    assert commit.date is not None
    assert int(commit.date.timestamp()) == COMMIT_EPOCH
    assert hook.repository_full_name == "myteam/myrepo"
    assert hook.actor_nickname == "pusher"


def test_null_new_side_decodes_to_none() -> None:
    """Bitbucket's ``"new": null`` on delete yields an empty head commit."""
    hook = decode_payload(encode(push_payload(new_name=None, old_name="gone")))

    change = hook.changes[0]
    assert change.new is None
    assert change.new_name == ""
    assert change.head_commit == BitbucketCommit()


def test_pull_request_fields() -> None:
    """Pull request endpoints expose repository and branch names."""
    hook = decode_payload(encode(pull_request_payload()))

    pr = hook.pull_request
    assert pr.id == 42
    assert pr.source_endpoint.full_name == "org/repo-fork"
    assert pr.source_endpoint.branch_name == "feature"
    assert pr.destination_endpoint.full_name == "org/repo"
    assert pr.destination_endpoint.branch_name == "main"
    assert pr.updated_on == dt.datetime(2024, 3, 2, 8, 0, 0, 123456, tzinfo=dt.UTC)


def test_empty_object_defaults_every_field() -> None:
    """Absent fields take zero values instead of failing."""
    hook = decode_payload(b"{}")

    assert hook.changes == []
    assert hook.pull_request.id == 0
    assert hook.pull_request.source_endpoint.full_name == ""
    assert hook.pull_request.updated_on is None
    assert hook.repository_full_name == ""
    assert hook.actor_nickname == ""


def _push_with_null_commit_parts() -> dict[str, typ.Any]:
    payload = push_payload()
    target = payload["push"]["changes"][0]["new"]["target"]
    target["author"] = None
    target["parents"] = None
    return payload


@pytest.mark.parametrize(
    "payload",
    [
        {"push": None},
        {"push": {"changes": None}},
        {"pullrequest": None},
        {"repository": None},
        {"actor": None},
        {"pullrequest": {"id": 1, "source": None, "destination": None}},
    ],
    ids=[
        "push",
        "push-changes",
        "pullrequest",
        "repository",
        "actor",
        "pullrequest-endpoints",
    ],
)
def test_null_sections_take_zero_values(payload: dict[str, typ.Any]) -> None:
    """JSON null for a nested object decodes like an absent one."""
    hook = decode_payload(encode(payload))

    assert hook.changes == []
    assert hook.pull_request.source_endpoint.full_name == ""
    assert hook.pull_request.destination_endpoint.branch_name == ""
    assert hook.repository_full_name == ""
    assert hook.actor_nickname == ""


def test_null_commit_author_and_parents_take_zero_values() -> None:
    """A commit with null author and parents decodes with empty accessors."""
    hook = decode_payload(encode(_push_with_null_commit_parts()))

    commit = hook.changes[0].head_commit
    assert commit.hash == HEAD_HASH
    assert commit.author_raw == ""
    assert commit.author_nickname == ""
    assert commit.parents is None


def test_unknown_fields_are_ignored() -> None:
    """Fields outside the declared schema do not cause errors."""
    hook = decode_payload(b'{"actor": {"nickname": "a", "uuid": "{x}"}, "extra": [1]}')
    assert hook.actor_nickname == "a"


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not json",
        b"[]",
        b'"string"',
        b'{"pullrequest": {"id": "forty-two"}}',
        b'{"push": {"changes": {}}}',
    ],
)
def test_structural_violations_are_malformed(body: bytes) -> None:
    """Invalid JSON, non-object bodies and wrong field types are rejected."""
    with pytest.raises(MalformedPayloadError, match="Bitbucket Cloud schema"):
        decode_payload(body)
