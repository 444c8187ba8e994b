"""Tarball downloads over HTTP(S).

The Installer only sees ``HttpClient``. ``RealHttpClient`` streams the body
to ``<dest>.part`` and renames it into place, so ``dest`` never holds a
truncated download. ``MockHttpClient`` serves canned bodies in tests.
"""

from __future__ import annotations

import base64
import shutil
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from shelf.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "auth_headers",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


def auth_headers(auth: str | None) -> dict[str, str]:
    """Build request headers for ``auth``.

    ``user:password`` becomes Basic auth, anything else is sent as a Bearer
    token.
    """
    if not auth:
        return {}
    if ":" in auth:
        token = base64.b64encode(auth.encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}
    return {"Authorization": f"Bearer {auth}"}


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP downloads."""

    def download(
        self,
        url: str,
        dest: Path,
        headers: Mapping[str, str] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to ``dest``.

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib (system certificates, no retries)."""

    def __init__(self, timeout: float = 60.0, user_agent: str = "shelf") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def download(
        self,
        url: str,
        dest: Path,
        headers: Mapping[str, str] | None = None,
    ) -> Result[Path, HttpError]:
        request_headers = {"User-Agent": self.user_agent, **(headers or {})}
        partial = dest.with_name(dest.name + ".part")
        try:
            req = urllib.request.Request(url, headers=request_headers)
            dest.parent.mkdir(parents=True, exist_ok=True)
            with (
                urllib.request.urlopen(
                    req, timeout=self.timeout, context=self._ssl_context
                ) as response,
                open(partial, "wb") as out,
            ):
                shutil.copyfileobj(response, out)
            partial.replace(dest)
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except (OSError, ValueError) as e:
            # TimeoutError is an OSError
            return Err(HttpError(url=url, status=0, message=str(e) or type(e).__name__))
        finally:
            partial.unlink(missing_ok=True)
        return Ok(dest)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_download("https://example.com/app.tgz", tarball_bytes)
    """

    def __init__(self) -> None:
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def download(
        self,
        url: str,
        dest: Path,
        headers: Mapping[str, str] | None = None,
    ) -> Result[Path, HttpError]:
        """Mock download - writes predefined content to dest."""
        self.calls.append((url, dict(headers or {})))

        if url not in self._download_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._download_responses[url]
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        return Ok(dest)
