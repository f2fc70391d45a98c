"""Tests for the HTTP session wrapper."""

from unittest.mock import MagicMock

import pytest
import requests
from requests_toolbelt.multipart.encoder import MultipartEncoder

from manga_bulk.core.transport import RemoteSession
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

MEMBER_PAGE = "<html><body>Your follows</body></html>"
ANONYMOUS_PAGE = "<form><input name='login_username'></form>"


def response(status_code=200, text=""):
    return MagicMock(status_code=status_code, text=text)


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session, headers={})


@pytest.fixture
def remote(tmp_path, http):
    return RemoteSession(
        base_url="https://example.org/",
        cookie_file=tmp_path / "cookies.txt",
        user_agent="manga-bulk-test",
        timeout=5,
        session=http,
    )


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "c1.zip"
    path.write_bytes(b"PK\x03\x04")
    return path


class TestCookies:
    def test_creates_cookie_file(self, remote, tmp_path):
        assert (tmp_path / "cookies.txt").exists()

    def test_sets_user_agent(self, remote, http):
        assert http.headers["User-Agent"] == "manga-bulk-test"

    def test_broken_cookie_file(self, tmp_path, http):
        cookie_file = tmp_path / "cookies.txt"
        cookie_file.write_text("this is not a cookie jar")
        with pytest.raises(CookieStoreError) as exc_info:
            RemoteSession("https://example.org", cookie_file, "ua", session=http)
        assert exc_info.value.exit_code == ExitCode.COOKIE_FILE_BROKEN

    def test_inaccessible_cookie_file(self, tmp_path, http):
        with pytest.raises(CookieStoreError) as exc_info:
            RemoteSession(
                "https://example.org", tmp_path / "no" / "cookies.txt", "ua", session=http
            )
        assert exc_info.value.exit_code == ExitCode.COOKIE_FILE_INACCESSIBLE

    def test_saved_cookies_reload(self, remote, tmp_path, http):
        remote.save_cookies()
        RemoteSession("https://example.org", tmp_path / "cookies.txt", "ua", session=http)


class TestLogin:
    def test_login_check_detects_login_form(self, remote, http):
        http.get.return_value = response(text=ANONYMOUS_PAGE)
        assert remote.is_logged_in() is False
        http.get.assert_called_once_with("https://example.org/follows", timeout=5)

    def test_login_check_member_page(self, remote, http):
        http.get.return_value = response(text=MEMBER_PAGE)
        assert remote.is_logged_in() is True

    def test_login_check_failure(self, remote, http):
        http.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(LoginCheckError):
            remote.is_logged_in()

    def test_login_success_is_decided_by_login_check(self, remote, http, tmp_path):
        http.post.return_value = response(text="anything")
        http.get.return_value = response(text=MEMBER_PAGE)

        remote.login("reader", "secret")

        _, kwargs = http.post.call_args
        assert kwargs["files"]["login_username"] == (None, "reader")
        assert kwargs["files"]["remember_me"] == (None, "1")
        assert (tmp_path / "cookies.txt").read_text().startswith("#LWP-Cookies")

    def test_login_rejected(self, remote, http):
        http.post.return_value = response()
        http.get.return_value = response(text=ANONYMOUS_PAGE)
        with pytest.raises(LoginRejectedError) as exc_info:
            remote.login("reader", "wrong")
        assert exc_info.value.exit_code == ExitCode.LOGIN_REJECTED

    def test_login_request_fails(self, remote, http):
        http.post.side_effect = requests.Timeout("slow")
        with pytest.raises(LoginRequestError):
            remote.login("reader", "secret")
        http.get.assert_not_called()


class TestSubmitChapter:
    def test_success(self, remote, http, archive):
        http.post.return_value = response(200, "")

        remote.submit_chapter(412, {"manga_id": "412", "chapter_number": "1"}, archive)

        args, kwargs = http.post.call_args
        assert args[0] == "https://example.org/ajax/actions.ajax.php?function=chapter_upload"
        assert isinstance(kwargs["data"], MultipartEncoder)
        assert kwargs["headers"]["referer"] == "https://example.org/upload/412"
        assert kwargs["headers"]["Content-Type"].startswith("multipart/form-data")

    def test_bad_status_is_protocol_error(self, remote, http, archive):
        http.post.return_value = response(502, "bad gateway")
        with pytest.raises(ProtocolError) as exc_info:
            remote.submit_chapter(1, {}, archive)
        assert exc_info.value.status_code == 502

    def test_body_on_success_is_rejection(self, remote, http, archive):
        http.post.return_value = response(200, "Chapter already exists")
        with pytest.raises(RejectionError, match="already exists"):
            remote.submit_chapter(1, {}, archive)

    def test_network_failure_is_transport_error(self, remote, http, archive):
        http.post.side_effect = requests.ConnectionError("reset")
        with pytest.raises(TransportError):
            remote.submit_chapter(1, {}, archive)

    def test_missing_archive(self, remote, http, tmp_path):
        with pytest.raises(ArchiveReadError):
            remote.submit_chapter(1, {}, tmp_path / "gone.zip")
        http.post.assert_not_called()


class TestGroupListing:
    def test_returns_page(self, remote, http):
        http.get.return_value = response(200, "<select></select>")
        assert remote.fetch_group_listing() == "<select></select>"

    def test_bad_status(self, remote, http):
        http.get.return_value = response(403, "")
        with pytest.raises(GroupListingError):
            remote.fetch_group_listing()

    def test_network_failure(self, remote, http):
        http.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(GroupListingError):
            remote.fetch_group_listing()
