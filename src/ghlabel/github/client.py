"""GitHub label API client.

Wraps PyGithub for listing and creating labels, and a `requests` session for
the by-name update/delete endpoints. The client is bound to a single
repository; callers only ever see `Label` values and `RemoteError`s.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import quote

import requests
from github import Auth, BadCredentialsException, Github, GithubException
from github.Repository import Repository

from ghlabel.labels import Label, normalize_color

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"

_AUTH_STATUSES = {401, 403}


class RemoteError(Exception):
    """A call against the remote label API failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthError(RemoteError):
    """The remote rejected our credentials."""


class TransportError(RemoteError):
    """The remote could not be reached or returned an unexpected response."""


class RemoteLabelSource(Protocol):
    """The label operations the sync executor needs from a remote."""

    @property
    def repository(self) -> str: ...

    def list_labels(self) -> list[Label]: ...

    def create_label(self, label: Label) -> None: ...

    def update_label(self, name: str, color: str) -> None: ...

    def delete_label(self, name: str) -> None: ...


def _github_error(e: GithubException, *, action: str) -> RemoteError:
    data: Any = e.data
    detail = data.get("message") if isinstance(data, dict) else None
    message = f"{action} failed ({e.status}): {detail or e}"
    if isinstance(e, BadCredentialsException) or e.status in _AUTH_STATUSES:
        return AuthError(message, status=e.status)
    return TransportError(message, status=e.status)


def _http_error(resp: requests.Response, *, action: str) -> RemoteError:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    detail = payload.get("message") if isinstance(payload, dict) else resp.text
    message = f"{action} failed ({resp.status_code}): {detail}"
    if resp.status_code in _AUTH_STATUSES:
        return AuthError(message, status=resp.status_code)
    return TransportError(message, status=resp.status_code)


class GitHubLabelClient:
    """Label operations for one GitHub repository."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = DEFAULT_BASE_URL,
        repo: Repository | None = None,
        github_api: Github | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Connect to a repository.

        Args:
            token: GitHub token used for API authentication.
            repository: Target repository in the form 'owner/repo'.
            base_url: API base URL (override for GitHub Enterprise).
            repo: Pre-built PyGithub repository, skips the connect call.
            github_api: Pre-built PyGithub client.
            session: Pre-built HTTP session for the REST calls.
            timeout: Per-request timeout in seconds for the REST calls.

        Raises:
            ValueError: If the token or repository is missing.
            AuthError: If GitHub rejects the token.
            TransportError: If the repository cannot be fetched.
        """
        if not token:
            raise ValueError("GitHub token is required")
        if not repository.strip("/ "):
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip("/ ")
        self._rest_base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "ghlabel",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=self._rest_base_url)

        try:
            self._repo = self._github.get_repo(self._repository_name)
        except GithubException as e:
            raise _github_error(e, action=f"Connecting to {self._repository_name}") from e
        except requests.RequestException as e:
            raise TransportError(f"Connecting to {self._repository_name} failed: {e}") from e
        logger.info(
            "Connected to repository", extra={"repo": self._repository_name}
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _label_url(self, name: str) -> str:
        if not name:
            raise ValueError("label name is required")
        return (
            f"{self._rest_base_url}/repos/{self._repository_name}/labels/"
            f"{quote(name, safe='')}"
        )

    def list_labels(self) -> list[Label]:
        """Fetch every label on the repository, following pagination."""

        try:
            labels = [
                Label(name=raw.name, color=normalize_color(raw.color))
                for raw in self._repo.get_labels()
            ]
        except GithubException as e:
            raise _github_error(e, action="Listing labels") from e
        except requests.RequestException as e:
            raise TransportError(f"Listing labels failed: {e}") from e

        logger.debug(
            "Labels fetched", extra={"repo": self._repository_name, "count": len(labels)}
        )
        return labels

    def create_label(self, label: Label) -> None:
        try:
            self._repo.create_label(name=label.name, color=normalize_color(label.color))
        except GithubException as e:
            raise _github_error(e, action=f"Creating label {label.name!r}") from e
        except requests.RequestException as e:
            raise TransportError(f"Creating label {label.name!r} failed: {e}") from e
        logger.info("Label created", extra={"repo": self._repository_name, "label": label.name})

    def update_label(self, name: str, color: str) -> None:
        url = self._label_url(name)
        payload = {"new_name": name, "color": normalize_color(color)}
        try:
            resp = self._session.patch(url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"Updating label {name!r} failed: {e}") from e
        if resp.status_code != 200:
            raise _http_error(resp, action=f"Updating label {name!r}")
        logger.info("Label updated", extra={"repo": self._repository_name, "label": name})

    def delete_label(self, name: str) -> None:
        url = self._label_url(name)
        try:
            resp = self._session.delete(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"Deleting label {name!r} failed: {e}") from e
        if resp.status_code != 204:
            raise _http_error(resp, action=f"Deleting label {name!r}")
        logger.info("Label deleted", extra={"repo": self._repository_name, "label": name})

    def close(self) -> None:
        """Release the underlying HTTP connections."""

        self._session.close()
        if self._github is not None:
            self._github.close()
