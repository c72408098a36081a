"""Resolve the commit a check run is attached to."""

import re
import subprocess
from pathlib import Path

from graphql_checks.errors import GitError

# subject of the merge commits GitHub creates for pull requests
PR_MERGE_MESSAGE = re.compile(r"Merge (\w+) into \w+", re.IGNORECASE)


def _git(*args: str, cwd: Path | None = None) -> str:
    return subprocess.run(  # noqa: S603
        ["git", *args],  # noqa: S607
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    ).stdout.strip()


def get_current_commit_sha(cwd: Path | None = None) -> str:
    """Get the SHA of the checked out commit.

    Pull request workflows check out a merge commit that does not exist on any
    branch. In that case the SHA of the pull request's head commit, taken from the
    merge commit's subject, is returned instead.

    :raises GitError: if HEAD cannot be resolved
    """
    try:
        sha = _git("rev-parse", "HEAD", cwd=cwd)
    except (subprocess.CalledProcessError, OSError) as exc:
        msg = f"Failed to resolve the current commit: {exc}"
        raise GitError(msg) from exc

    try:
        message = _git("show", sha, "-s", "--format=%s", cwd=cwd)
    except (subprocess.CalledProcessError, OSError):
        # the subject is a best-effort hint only
        return sha

    if match := PR_MERGE_MESSAGE.search(message):
        return match.group(1)
    return sha
