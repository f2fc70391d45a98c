"""HTTP session for the remote site: cookies, login and chapter submission."""

import logging
from collections.abc import Callable, Mapping
from http.cookiejar import LoadError, LWPCookieJar
from pathlib import Path
from typing import Protocol

import requests
from requests_toolbelt.multipart.encoder import MultipartEncoder, MultipartEncoderMonitor

from manga_bulk.errors import (
    ArchiveReadError,
    CookieStoreError,
    ExitCode,
    GroupListingError,
    LoginCheckError,
    LoginRejectedError,
    LoginRequestError,
    ProtocolError,
    RejectionError,
    TransportError,
)

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ChapterTransport(Protocol):
    """Anything that can submit one chapter archive."""

    def submit_chapter(
        self,
        work_id: int,
        fields: Mapping[str, str],
        archive: Path,
        progress: ProgressCallback | None = None,
    ) -> None: ...


class RemoteSession:
    """requests.Session with a cookie jar persisted between invocations."""

    LOGIN_PATH = "ajax/actions.ajax.php?function=login"
    UPLOAD_PATH = "ajax/actions.ajax.php?function=chapter_upload"
    MEMBER_PAGE_PATH = "follows"
    LISTING_PATH = "upload/1"
    # Present on pages served to anonymous visitors only
    LOGIN_FORM_MARKER = "login_username"

    def __init__(
        self,
        base_url: str,
        cookie_file: Path,
        user_agent: str,
        timeout: float = 300.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cookie_file = cookie_file
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.cookies = self._load_cookies()
        self.session.cookies = self.cookies  # type: ignore[assignment]

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _load_cookies(self) -> LWPCookieJar:
        """Open (creating if needed) the cookie file.

        Raises:
            CookieStoreError: If the file cannot be created or parsed
        """
        jar = LWPCookieJar(str(self.cookie_file))
        try:
            self.cookie_file.touch(exist_ok=True)
        except OSError as e:
            raise CookieStoreError(
                f'The cookie file "{self.cookie_file}" is inaccessible: {e}'
            ) from e

        if self.cookie_file.stat().st_size == 0:
            return jar
        try:
            jar.load(ignore_discard=True)
        except (LoadError, OSError) as e:
            raise CookieStoreError(
                f'The cookie file "{self.cookie_file}" seems to be broken: {e}',
                ExitCode.COOKIE_FILE_BROKEN,
            ) from e
        return jar

    def save_cookies(self) -> None:
        try:
            self.cookies.save(ignore_discard=True)
        except OSError as e:
            raise CookieStoreError(
                f'The cookie file "{self.cookie_file}" is inaccessible: {e}'
            ) from e

    def is_logged_in(self) -> bool:
        """Request a members-only page.

        Raises:
            LoginCheckError: If the login check request fails
        """
        try:
            response = self.session.get(
                self._url(self.MEMBER_PAGE_PATH), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise LoginCheckError(f"Login check failed: {e}") from e
        return self.LOGIN_FORM_MARKER not in response.text

    def login(self, username: str, password: str) -> None:
        """Log in and persist the session cookies.

        The login response itself is not trusted; success is decided by a
        follow-up login check.

        Raises:
            LoginRequestError: If the login request fails
            LoginCheckError: If the login check request fails
            LoginRejectedError: If the login check still sees an anonymous session
        """
        log.info("Logging in as %s", username)
        try:
            self.session.post(
                self._url(self.LOGIN_PATH),
                headers={
                    "referer": self._url("login"),
                    "X-Requested-With": "XMLHttpRequest",
                },
                files={
                    "login_username": (None, username),
                    "login_password": (None, password),
                    "remember_me": (None, "1"),
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise LoginRequestError(f"Login failed: {e}") from e

        if not self.is_logged_in():
            raise LoginRejectedError(
                "Not logged in. Probably wrong username or password"
            )
        self.save_cookies()

    def submit_chapter(
        self,
        work_id: int,
        fields: Mapping[str, str],
        archive: Path,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Submit one chapter archive as a streamed multipart form.

        Raises:
            ArchiveReadError: If the archive cannot be opened
            TransportError: If no response was received
            ProtocolError: If the status code is not 200
            RejectionError: If the response body is not empty
        """
        try:
            handle = open(archive, "rb")
        except OSError as e:
            raise ArchiveReadError(f"Could not open {archive}: {e}") from e

        try:
            encoder = MultipartEncoder(
                fields=[
                    *fields.items(),
                    ("file", (archive.name, handle, "application/zip")),
                ]
            )
            body: MultipartEncoder | MultipartEncoderMonitor = encoder
            if progress is not None:
                body = MultipartEncoderMonitor(
                    encoder, lambda m: progress(m.bytes_read, m.len)
                )
            response = self.session.post(
                self._url(self.UPLOAD_PATH),
                data=body,
                headers={
                    "Content-Type": body.content_type,
                    "referer": self._url(f"upload/{work_id}"),
                    "X-Requested-With": "XMLHttpRequest",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Upload request failed: {e}") from e
        finally:
            handle.close()

        if response.status_code != 200:
            raise ProtocolError(response.status_code, response.text)
        if response.text != "":
            raise RejectionError(response.text)

    def fetch_group_listing(self) -> str:
        """Fetch the upload page whose group picker lists every group.

        Raises:
            GroupListingError: If the page cannot be fetched
        """
        try:
            response = self.session.get(
                self._url(self.LISTING_PATH),
                headers={"referer": self.base_url + "/"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise GroupListingError(f"Failed to retrieve upload page: {e}") from e

        if response.status_code != 200:
            raise GroupListingError(
                f"Failed to retrieve upload page, unexpected HTTP {response.status_code}"
            )
        return response.text
