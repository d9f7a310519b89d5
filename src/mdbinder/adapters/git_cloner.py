"""Git cloner: keeps a shallow checkout of each repository via subprocess."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from mdbinder.core.errors import CloneError, redact_text
from mdbinder.core.interfaces import ClonerPort

logger = logging.getLogger(__name__)


class GitCloner(ClonerPort):
    """Clones Bitbucket repositories over HTTP with embedded credentials.

    An existing directory is reused only if its ``remote.origin.url`` is the
    expected clone URL; anything else is deleted and cloned again (latest
    commit of one branch only).
    """

    def __init__(
        self,
        base_url: str,
        project_id: str,
        user: str | None = None,
        password: str | None = None,
        branch: str = "master",
        timeout: int = 600,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._project_id = project_id
        self._user = user
        self._password = password
        self.branch = branch
        self._timeout = timeout

    def clone_url(self, slug: str) -> str:
        """HTTP clone URL of a repository."""
        parts = urlsplit(self._base_url)
        netloc = parts.netloc
        if self._user:
            creds = quote(self._user, safe="")
            if self._password:
                creds += ":" + quote(self._password, safe="")
            netloc = f"{creds}@{netloc}"
        path = f"{parts.path}/scm/{self._project_id}/{slug}.git"
        return urlunsplit((parts.scheme, netloc, path, "", ""))

    def ensure_clone(self, slug: str, dest: str) -> bool:
        url = self.clone_url(slug)
        if self.origin_url(dest) == url:
            logger.debug("Reusing checkout of %s at %s", slug, dest)
            return True

        logger.info("Detected invalid git repo %s. Deleting and recloning %s", dest, slug)
        shutil.rmtree(dest, ignore_errors=True)
        try:
            self._git(
                "clone", url, "--branch", self.branch, "--single-branch", "--depth", "1", dest
            )
        except CloneError as e:
            logger.warning("Could not git clone repo %s to %s: %s", slug, dest, e)
            return False
        return True

    def origin_url(self, dest: str) -> str | None:
        """The checkout's origin URL, or None if `dest` is not a git checkout."""
        if not Path(dest).is_dir():
            return None
        try:
            output = self._git(
                f"--git-dir={Path(dest) / '.git'}",
                f"--work-tree={dest}",
                "config",
                "--get",
                "remote.origin.url",
            )
        except CloneError:
            return None
        return output.strip() or None

    def _git(self, *args: str) -> str:
        """Run git, returning stdout.

        Raises:
            CloneError: If git is missing, times out or exits non-zero.
        """
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CloneError(redact_text(f"git {args[0]} failed: {e}")) from e

        if result.returncode != 0:
            raise CloneError(
                redact_text(f"git {args[0]} exited {result.returncode}: {result.stderr.strip()}")
            )
        return result.stdout
