"""Minimal HTTP GET and POST for the smart HTTP protocol."""

from __future__ import annotations

import urllib.error
import urllib.request

USER_AGENT = "git/codecrafters"


class HttpError(Exception):
    """Raised when an HTTP request fails."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def _perform(request: urllib.request.Request) -> bytes:
    method = request.get_method()
    try:
        with urllib.request.urlopen(request) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        raise HttpError(
            f"{method} {request.full_url} failed with status {exc.code}", status=exc.code
        ) from exc
    except urllib.error.URLError as exc:
        raise HttpError(f"{method} {request.full_url} failed: {exc.reason}") from exc
    except (OSError, ValueError) as exc:
        raise HttpError(f"{method} {request.full_url} failed: {exc}") from exc


def http_get(url: str) -> bytes:
    """Fetch ``url``, following redirects, and return the response body."""
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    return _perform(request)


def http_post(url: str, content_type: str, body: bytes) -> bytes:
    """POST ``body`` to ``url`` with the given content type and return the response body."""
    request = urllib.request.Request(
        url,
        data=bytes(body),
        headers={"User-Agent": USER_AGENT, "Content-Type": content_type},
        method="POST",
    )
    return _perform(request)