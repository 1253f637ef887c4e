"""
Error taxonomy shared by every client operation.

Every failure surfaces as a single KairosError whose ``kind`` names the stage
that failed:

- PROTOCOL:  server answered with a status outside the operation's success set
- TRANSPORT: the HTTP request could not be sent or no response arrived
- ENCODING:  JSON serialization / deserialization failed
- IO:        reading the response body failed
"""

from enum import Enum
from typing import List, Optional


class ErrorKind(str, Enum):
    PROTOCOL = "protocol"
    TRANSPORT = "transport"
    ENCODING = "encoding"
    IO = "io"


class KairosError(Exception):
    """Failure of a KairosDB client operation."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        errors: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.errors = list(errors or [])
        self.cause = cause

    @classmethod
    def protocol(cls, status: int, message: str, errors: Optional[List[str]] = None) -> "KairosError":
        """Build a protocol error; the status is embedded in the message."""
        text = message
        if errors:
            text = f"{message} ({'; '.join(errors)})"
        return cls(ErrorKind.PROTOCOL, text, status=status, errors=errors)

    @classmethod
    def from_transport(cls, err: BaseException) -> "KairosError":
        reason = getattr(err, "reason", None) or err
        return cls(ErrorKind.TRANSPORT, f"HTTP transport failed: {reason}", cause=err)

    @classmethod
    def from_encoding(cls, err: BaseException) -> "KairosError":
        return cls(ErrorKind.ENCODING, f"JSON encoding failed: {err}", cause=err)

    @classmethod
    def from_io(cls, err: BaseException) -> "KairosError":
        return cls(ErrorKind.IO, f"reading response failed: {err}", cause=err)

    @property
    def is_protocol(self) -> bool:
        return self.kind is ErrorKind.PROTOCOL

    @property
    def is_transport(self) -> bool:
        return self.kind is ErrorKind.TRANSPORT

    @property
    def is_encoding(self) -> bool:
        return self.kind is ErrorKind.ENCODING

    @property
    def is_io(self) -> bool:
        return self.kind is ErrorKind.IO

    def __repr__(self) -> str:
        return f"KairosError(kind={self.kind.value!r}, message={self.message!r}, status={self.status!r})"
