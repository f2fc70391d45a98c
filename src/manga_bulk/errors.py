"""Exception types and process exit codes."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes, one per error category."""

    OK = 0
    SCAN_FAILED = 1
    INVALID_VOLUME_PATTERN = 2
    INVALID_CHAPTER_PATTERN = 3
    TEMPLATE_INACCESSIBLE = 4
    NO_USERNAME = 5
    NO_PASSWORD = 6
    COOKIE_FILE_INACCESSIBLE = 7
    COOKIE_FILE_BROKEN = 8
    LOGIN_REQUEST_FAILED = 9
    LOGIN_CHECK_FAILED = 10
    LOGIN_REJECTED = 11
    INVALID_LANGUAGE = 12
    INVALID_WORK_ID = 13
    TEMPLATE_BROKEN = 14
    NOT_LOGGED_IN = 15
    INVALID_TITLE_PATTERN = 16
    UPLOAD_HALTED = 17
    GROUP_CACHE_MISSING = 18
    GROUP_LISTING_FAILED = 19
    INVALID_RESUME_POSITION = 20
    INVALID_GROUP_ID = 21


class MangaBulkError(Exception):
    """Base error for manga-bulk. Carries the exit code the CLI should use."""

    exit_code: ExitCode = ExitCode.SCAN_FAILED

    def __init__(self, message: str, exit_code: ExitCode | None = None):
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(message)


# Configuration errors


class ConfigurationError(MangaBulkError):
    """Bad flag or pattern. Raised before any work is done."""


class PatternError(ConfigurationError):
    """A volume, chapter or title pattern failed to compile."""

    _CODES = {
        "volume": ExitCode.INVALID_VOLUME_PATTERN,
        "chapter": ExitCode.INVALID_CHAPTER_PATTERN,
        "title": ExitCode.INVALID_TITLE_PATTERN,
    }

    def __init__(self, field: str, pattern: str, reason: str):
        self.field = field
        self.pattern = pattern
        super().__init__(
            f"Invalid {field} pattern {pattern!r}: {reason}",
            self._CODES.get(field, ExitCode.INVALID_CHAPTER_PATTERN),
        )


class InvalidLanguageError(ConfigurationError):
    exit_code = ExitCode.INVALID_LANGUAGE


class InvalidWorkIdError(ConfigurationError):
    exit_code = ExitCode.INVALID_WORK_ID


class InvalidResumePositionError(ConfigurationError):
    exit_code = ExitCode.INVALID_RESUME_POSITION


class InvalidGroupIdError(ConfigurationError):
    exit_code = ExitCode.INVALID_GROUP_ID


class MissingCredentialsError(ConfigurationError):
    """Username or password was not supplied by flag or config."""

    def __init__(self, field: str):
        self.field = field
        code = ExitCode.NO_USERNAME if field == "username" else ExitCode.NO_PASSWORD
        super().__init__(f"No {field} was provided", code)


# Input errors


class InputError(MangaBulkError):
    """A file or directory the operation depends on is missing or unusable."""


class DirectoryScanError(InputError):
    exit_code = ExitCode.SCAN_FAILED


class TemplateAccessError(InputError):
    exit_code = ExitCode.TEMPLATE_INACCESSIBLE


class TemplateBrokenError(InputError):
    exit_code = ExitCode.TEMPLATE_BROKEN


class GroupCacheMissingError(InputError):
    """Search was attempted before any cache update."""

    exit_code = ExitCode.GROUP_CACHE_MISSING

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Group cache {path} doesn't exist, run 'group update' first"
        )


# Session and authentication errors


class SessionError(MangaBulkError):
    """Cookie store or authentication problem. Needs operator action."""


class CookieStoreError(SessionError):
    exit_code = ExitCode.COOKIE_FILE_INACCESSIBLE


class LoginRequestError(SessionError):
    exit_code = ExitCode.LOGIN_REQUEST_FAILED


class LoginCheckError(SessionError):
    exit_code = ExitCode.LOGIN_CHECK_FAILED


class LoginRejectedError(SessionError):
    exit_code = ExitCode.LOGIN_REJECTED


class NotAuthenticatedError(SessionError):
    exit_code = ExitCode.NOT_LOGGED_IN


class GroupListingError(SessionError):
    exit_code = ExitCode.GROUP_LISTING_FAILED


# Submission errors


class SubmissionError(MangaBulkError):
    """A single chapter submission failed. Halts the current manifest."""

    exit_code = ExitCode.UPLOAD_HALTED
    kind = "submission"


class TransportError(SubmissionError):
    """The request never produced a response (network failure, timeout)."""

    kind = "transport"


class ProtocolError(SubmissionError):
    """The remote answered with a non-200 status code."""

    kind = "protocol"

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Invalid status code {status_code}")


class RejectionError(SubmissionError):
    """The remote answered 200 but with a rejection body."""

    kind = "rejected"

    def __init__(self, body: str):
        self.body = body
        super().__init__(f"Server rejected the chapter: {body}")


class ArchiveReadError(SubmissionError):
    """The archive named by a manifest entry could not be opened."""

    kind = "archive"
