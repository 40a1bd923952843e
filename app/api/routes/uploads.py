# app/api/routes/uploads.py
import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UploadValidationError
from app.db.session import get_db
from app.repositories.sqlalchemy_store import SqlAlchemyUnitOfWork
from app.schemas.summary import UploadErrorResponse, UploadResponse
from app.schemas.upload import RawUpload
from app.services.batch_upload import process_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

HINT_SELECT_FILES = "Please select at least one CSV file to upload."
HINT_VALID_CSV = "Please ensure you're uploading valid attendance report CSV files."
HINT_TYPE_MISMATCH = (
    "The file extension does not match the actual file content. "
    "Please upload a genuine CSV file."
)
HINT_EMPTY_FILE = "The uploaded file is empty. Please provide a file with valid meeting data."
HINT_NO_ATTENDEES = "The CSV file must contain at least one attendee with a valid email address."
HINT_INVALID_EMAIL = (
    "One or more email addresses in the CSV are invalid. Please check the email format."
)
HINT_INVALID_FORMAT = (
    "The CSV file does not have the required attendance report format. "
    "Please ensure all required fields are present."
)
HINT_SERVER_ERROR = "An unexpected error occurred while processing the files."


def hint_for(error_code: str) -> str:
    """
    Map an upload error code to a user-facing hint.
    """
    if error_code == "NO_FILES":
        return HINT_SELECT_FILES
    if error_code in ("TYPE_MISMATCH", "BINARY_CONTENT"):
        return HINT_TYPE_MISMATCH
    if error_code in ("EMPTY_FILE", "EMPTY_CONTENT"):
        return HINT_EMPTY_FILE
    if error_code == "NO_ATTENDEES":
        return HINT_NO_ATTENDEES
    if error_code.startswith("INVALID_EMAIL"):
        return HINT_INVALID_EMAIL
    if error_code.startswith("MISSING") or error_code == "INVALID_HEADER":
        return HINT_INVALID_FORMAT
    return HINT_VALID_CSV


@router.post(
    "",
    response_model=UploadResponse,
    status_code=HTTPStatus.OK,
    summary="Upload a batch of attendance reports",
    description=(
        "Accepts one or more attendance report files as multipart `files`.\n\n"
        "Every file is checked before anything is stored:\n"
        "- the declared content type must be a CSV-like label\n"
        "- the bytes must really be delimited text (not JSON/XML/HTML/binary)\n"
        "- the report must parse as a sectioned or simple attendance export\n\n"
        "If any file fails, nothing from the batch is persisted."
    ),
    responses={
        400: {
            "model": UploadErrorResponse,
            "description": "The batch was rejected; no data was stored.",
        },
        500: {
            "model": UploadErrorResponse,
            "description": "Unexpected failure; the batch was rolled back.",
        },
    },
)
async def upload_attendance_reports(
    files: Optional[List[UploadFile]] = File(default=None),
    db: AsyncSession = Depends(get_db),
):
    """
    Validate and persist an upload batch, returning the new summary.
    """
    uploads = [
        RawUpload(
            content=await upload.read(),
            filename=upload.filename or "",
            content_type=upload.content_type or "",
        )
        for upload in files or []
    ]

    try:
        result = await process_batch(uploads, SqlAlchemyUnitOfWork(db))
    except UploadValidationError as exc:
        body = UploadErrorResponse(
            error=exc.message,
            error_code=exc.error_code,
            hint=hint_for(exc.error_code),
            detected_type=exc.detected_type,
            original_extension=exc.original_extension,
            file_name=exc.file_name,
        )
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=body.model_dump())
    except Exception as exc:
        logger.exception("Unexpected error while processing upload batch")
        body = UploadErrorResponse(
            error=str(exc),
            error_code="SERVER_ERROR",
            hint=HINT_SERVER_ERROR,
        )
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    return UploadResponse(summary_id=result.summary_id, html_table=result.html_table)
