from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator


class ErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    DECODE_ERROR = "decode_error"
    INVALID_PATH = "invalid_path"
    SECURITY_REJECTED = "security_rejected"
    IO_ERROR = "io_error"


class VaultError(Exception):
    code: ErrorCode = ErrorCode.IO_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(VaultError):
    code = ErrorCode.NOT_FOUND


class AlreadyExists(VaultError):
    code = ErrorCode.ALREADY_EXISTS


class DecodeError(VaultError):
    code = ErrorCode.DECODE_ERROR


class InvalidPath(VaultError):
    code = ErrorCode.INVALID_PATH


class SecurityRejected(VaultError):
    code = ErrorCode.SECURITY_REJECTED


class VaultIOError(VaultError):
    code = ErrorCode.IO_ERROR


@contextmanager
def os_errors(action: str) -> Iterator[None]:
    """Translate OSError raised inside the block into the vault taxonomy."""
    try:
        yield
    except FileNotFoundError as e:
        raise NotFound(f"{action}: {e.filename or e}") from e
    except FileExistsError as e:
        raise AlreadyExists(f"{action}: {e.filename or e}") from e
    except OSError as e:
        raise VaultIOError(f"{action}: {e.strerror or e}") from e
