"""Item identifiers for GitHub objects.

Identifiers are the path component of an object's html_url:

    /owner/repo                       repository
    /owner/repo/issues/12             issue
    /owner/repo/pull/7                pull request
    /owner/repo/blob/main/src/app.py  file on a branch

Branch names may contain slashes, so a blob path only splits into ref and
file path once the branch is known.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote, urlparse

PATH_PATTERN = re.compile(r"^/([^/]+/[^/]+)(?:/(issues|pull|blob|tree)(?:/(.*))?)?/?$")


@dataclass(frozen=True)
class GitHubPath:
    repository: str
    kind: str
    number: int | None = None
    ref: str | None = None
    path: str = ""


def identifier_for(html_url: str) -> str:
    """Return the item identifier for an object's html_url."""
    return urlparse(html_url).path.rstrip("/")


def parse_identifier(identifier: str, branch: str | None = None) -> GitHubPath:
    """Parse an identifier back into repository, object kind and locator.

    Args:
        identifier: Item identifier
        branch: Branch the file is expected on. Without it the first path
            segment after ``blob/`` is taken as the ref.

    Raises:
        ValueError: If the identifier is not a supported GitHub object path
    """
    match = PATH_PATTERN.match(identifier)
    if not match:
        raise ValueError(f"Unsupported GitHub identifier: {identifier!r}")

    repository, section, rest = match.groups()
    rest = (rest or "").strip("/")

    if section is None:
        return GitHubPath(repository=repository, kind="repository")

    if section in ("issues", "pull"):
        if not rest.isdigit():
            raise ValueError(f"Invalid {section} number in identifier: {identifier!r}")
        kind = "issue" if section == "issues" else "pull"
        return GitHubPath(repository=repository, kind=kind, number=int(rest))

    if section == "tree":
        raise ValueError(f"Directories are not indexed: {identifier!r}")

    locator = unquote(rest)
    if branch and locator.startswith(branch + "/"):
        ref, path = branch, locator[len(branch) + 1 :]
    else:
        ref, _, path = locator.partition("/")
    if not path:
        raise ValueError(f"Directories are not indexed: {identifier!r}")
    return GitHubPath(repository=repository, kind="file", ref=ref, path=path)
