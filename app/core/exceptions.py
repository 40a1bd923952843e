# app/core/exceptions.py
"""Exception hierarchy for attendance uploads."""

from __future__ import annotations

from typing import Any, Dict


class AttendanceUploadError(Exception):
    """Base exception for all attendance upload errors."""


class UploadValidationError(AttendanceUploadError):
    """
    Raised when an uploaded file (or the batch as a whole) is rejected.

    Carries a stable `error_code` token so callers can react without
    parsing the message.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        detected_type: str | None = None,
        original_extension: str | None = None,
        file_name: str | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.detected_type = detected_type
        self.original_extension = original_extension
        self.file_name = file_name
        super().__init__(f"{error_code}: {message}")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.detected_type is not None:
            payload["detected_type"] = self.detected_type
        if self.original_extension is not None:
            payload["original_extension"] = self.original_extension
        if self.file_name is not None:
            payload["file_name"] = self.file_name
        return payload


class NoFilesError(UploadValidationError):
    """The batch contained no files."""

    def __init__(self) -> None:
        super().__init__("NO_FILES", "No files uploaded")


class FileValidationError(UploadValidationError):
    """A file failed the content-type label, size or content sniffing checks."""


class ParseFailure(UploadValidationError):
    """The dialect parser rejected the decoded text."""


class FileParseError(UploadValidationError):
    """A parse failure attributed to a specific file within a batch."""

    @classmethod
    def from_failure(cls, failure: ParseFailure, file_name: str) -> "FileParseError":
        return cls(
            failure.error_code,
            f"{file_name}: {failure.message}",
            file_name=file_name,
        )
