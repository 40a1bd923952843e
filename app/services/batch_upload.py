# app/services/batch_upload.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from app.core.config import get_settings
from app.core.exceptions import (
    FileParseError,
    FileValidationError,
    NoFilesError,
    ParseFailure,
    UploadValidationError,
)
from app.models.attendant import Attendant
from app.models.meeting import Meeting
from app.models.meeting_attendance import MeetingAttendance
from app.models.summary import Summary
from app.repositories.protocols import UnitOfWork
from app.schemas.upload import BatchResult, MeetingRecord, RawUpload
from app.services import content_classifier, dialect_parser
from app.services.summary_renderer import (
    SummaryData,
    meeting_key,
    render_html_table,
    render_xlsx,
)

logger = logging.getLogger(__name__)


async def process_batch(files: Sequence[RawUpload], uow: UnitOfWork) -> BatchResult:
    """
    Validate every file of an upload batch, then persist all of them atomically.

    Phases
    ------
    1) Validate-all: for each file, in order, check the content-type label,
       sniff the content and parse it. The first failure aborts the batch
       before anything is written.
    2) Commit: inside one transaction (if the store supports one) create the
       meetings, attendants (reused by exact email), attendance links and a
       summary owning the meetings.
    3) Any exception during commit rolls the transaction back and is
       re-raised unchanged.

    Raises
    ------
    UploadValidationError
        For any client-side defect in the batch (NO_FILES, TYPE_MISMATCH,
        EMPTY_FILE, INVALID_EMAIL_FORMAT, ...).
    """
    records = validate_batch(files)

    logger.info("Upload batch validated: %d file(s), committing", len(records))
    return await _commit_batch(records, uow)


def validate_batch(files: Sequence[RawUpload]) -> List[MeetingRecord]:
    """
    Run the label check, content classifier and dialect parser over every
    file. Returns one MeetingRecord per file, in input order.
    """
    settings = get_settings()

    if not files:
        raise NoFilesError()

    if len(files) > settings.MAX_UPLOAD_FILES:
        raise UploadValidationError(
            "TOO_MANY_FILES",
            f"At most {settings.MAX_UPLOAD_FILES} files can be uploaded at once "
            f"(got {len(files)}).",
        )

    records: List[MeetingRecord] = []
    for upload in files:
        try:
            records.append(_validate_file(upload, settings.MAX_UPLOAD_BYTES))
        except UploadValidationError as exc:
            logger.warning(
                "Rejected upload batch at %s: %s (%s)",
                upload.filename,
                exc.error_code,
                exc.message,
            )
            raise

    return records


def _validate_file(upload: RawUpload, max_bytes: int) -> MeetingRecord:
    extension = content_classifier.file_extension(upload.filename)

    if not content_classifier.is_allowed_content_type(upload.content_type):
        raise FileValidationError(
            "TYPE_MISMATCH",
            f"Invalid file type for {upload.filename}. Expected CSV, "
            f"got '{upload.content_type}'.",
            detected_type=upload.content_type,
            original_extension=extension,
            file_name=upload.filename,
        )

    if len(upload.content) > max_bytes:
        raise FileValidationError(
            "FILE_TOO_LARGE",
            f"{upload.filename} is {len(upload.content)} bytes; the limit is {max_bytes}.",
            original_extension=extension,
            file_name=upload.filename,
        )

    outcome = content_classifier.classify(upload.content, upload.filename)
    if not outcome.is_valid:
        raise FileValidationError(
            outcome.error_code or "VALIDATION_ERROR",
            outcome.message or f"Invalid CSV file format for {upload.filename}",
            detected_type=outcome.detected_type,
            original_extension=outcome.original_extension,
            file_name=upload.filename,
        )

    text = content_classifier.decode_content(upload.content, upload.filename)
    try:
        return dialect_parser.parse(text)
    except ParseFailure as exc:
        raise FileParseError.from_failure(exc, upload.filename) from exc


async def _commit_batch(records: Sequence[MeetingRecord], uow: UnitOfWork) -> BatchResult:
    transaction = await uow.begin()
    if transaction is None:
        logger.info("Storage has no transaction support; writing without one")

    try:
        result = await _write_records(records, uow)
        if transaction is not None:
            await transaction.commit()
    except Exception:
        logger.exception("Upload batch failed during commit; rolling back")
        if transaction is not None:
            await transaction.rollback()
        raise

    logger.info(
        "Upload batch committed: summary_id=%s meetings=%s",
        result.summary_id,
        result.meeting_ids,
    )
    return result


async def _write_records(records: Sequence[MeetingRecord], uow: UnitOfWork) -> BatchResult:
    summary_data = SummaryData()
    meetings: List[Meeting] = []

    for record in records:
        meeting = await uow.meetings.create(
            Meeting(title=record.title, date=record.occurred_at)
        )
        meetings.append(meeting)
        key = meeting_key(record.title, record.occurred_at)

        for attendee in record.attendees:
            attendant = await uow.attendants.find_by_email(attendee.email)
            if attendant is None:
                attendant = await uow.attendants.create(
                    Attendant(email=attendee.email, name=attendee.name)
                )

            await uow.attendances.create(
                MeetingAttendance(
                    meeting_id=meeting.id,
                    attendant_id=attendant.id,
                    duration_seconds=attendee.duration.total_seconds(),
                )
            )
            summary_data.add(attendant.email, key, attendee.duration)

    html_table = render_html_table(summary_data)
    summary = await uow.summaries.create(
        Summary(
            created_at=datetime.now(tz=timezone.utc),
            html_table=html_table,
            xlsx_data=render_xlsx(summary_data),
        )
    )

    for meeting in meetings:
        meeting.summary_id = summary.id
        await uow.meetings.update(meeting)

    return BatchResult(
        summary_id=summary.id,
        html_table=html_table,
        meeting_ids=[meeting.id for meeting in meetings],
    )
