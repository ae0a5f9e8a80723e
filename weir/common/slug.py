"""Repository full-name utilities.

Bitbucket documents ``repository.full_name`` as the workspace and repository
slugs joined with a single ``/``. These are identifiers, not paths, so they
are parsed here rather than with ``pathlib``.
"""

from __future__ import annotations


def repo_full_name(owner: str, name: str) -> str:
    """Join ``owner`` and ``name`` into an ``owner/name`` identifier.

    Examples
    --------
    >>> repo_full_name("myteam", "myrepo")
    'myteam/myrepo'

    """
    return f"{owner}/{name}"


def split_repo_full_name(full_name: str) -> tuple[str, str]:
    """Split a repository full name into owner and name.

    Parameters
    ----------
    full_name:
        Identifier in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the separator is missing, repeated, or either side is empty.

    Examples
    --------
    >>> split_repo_full_name("myteam/myrepo")
    ('myteam', 'myrepo')

    """
    if full_name.count("/") != 1:
        msg = f"Invalid full name: expected 'owner/name', got {full_name!r}"
        raise ValueError(msg)

    owner, name = full_name.split("/")
    if not owner or not name:
        msg = f"Invalid full name: expected 'owner/name', got {full_name!r}"
        raise ValueError(msg)

    return owner, name
