"""Bitbucket Server REST client for listing the repositories of a project."""

from __future__ import annotations

import logging
from typing import Any

import requests

from mdbinder.core.errors import SourceError, redact_text
from mdbinder.core.interfaces import RepositorySourcePort

logger = logging.getLogger(__name__)

_REPOS_ENDPOINT = "/rest/api/1.0/projects/{project}/repos"


class BitbucketRepositorySource(RepositorySourcePort):
    """Lists repository slugs of a Bitbucket project via the REST API."""

    def __init__(
        self,
        base_url: str,
        project_id: str,
        user: str | None = None,
        password: str | None = None,
        page_limit: int = 100,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._project_id = project_id
        self._page_limit = page_limit
        self._timeout = timeout
        self._session = session or requests.Session()
        if user is not None:
            self._session.auth = (user, password or "")

    def list_repositories(self) -> list[str]:
        """Fetch all repository slugs, following pagination.

        See https://confluence.atlassian.com/bitbucket/what-is-a-slug-224395839.html
        """
        logger.info("Getting repos of project %s", self._project_id)
        url = self._base_url + _REPOS_ENDPOINT.format(project=self._project_id)

        slugs: list[str] = []
        start = 0
        while True:
            body = self._get_page(url, start)
            slugs.extend(value["slug"] for value in body.get("values", []))
            if body.get("isLastPage", True):
                break
            start = body["nextPageStart"]

        logger.info("Found repos %s", slugs)
        return slugs

    def _get_page(self, url: str, start: int) -> dict[str, Any]:
        """Fetch one page of the repository listing."""
        try:
            response = self._session.get(
                url,
                params={"start": start, "limit": self._page_limit},
                timeout=self._timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise SourceError(f"Failed to list repositories: {redact_text(str(e))}") from e

        if not isinstance(body, dict):
            raise SourceError("Unexpected repository listing response")
        return body
