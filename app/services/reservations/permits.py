import logging

from app.core import i18n
from app.core.errors import StorageError
from app.core.i18n import Language
from app.schemas.checkout import PermitSubmission
from app.schemas.result import OperationResult

logger = logging.getLogger(__name__)

async def submit_permit(repository, submission: PermitSubmission, language: Language = Language.EN) -> OperationResult:
    """Attach permit documents to the selected bookings and lending records.

    Stops at the first failed update and reports the backend message.
    """
    if not submission.booking_ids and not submission.lending_ids:
        return OperationResult(status="failed", message=i18n.get_text(
            language, "Please select at least one record", "Silakan pilih setidaknya satu data",
        ))
    if not submission.attachments:
        return OperationResult(status="failed", message=i18n.get_text(
            language,
            "Please upload at least one permit document",
            "Silakan unggah setidaknya satu dokumen izin",
        ))

    targets = [("bookings", i) for i in submission.booking_ids]
    targets += [("lending_tool", i) for i in submission.lending_ids]
    try:
        for table, record_id in targets:
            await repository.update_attachments(table, record_id, submission.attachments)
    except StorageError as e:
        logger.error("Permit submission aborted at %s: %s", e.operation, e.message)
        return OperationResult(status="failed", message=i18n.error(
            language, e.message, "Failed to submit permit letter", "Gagal mengirim surat izin",
        ).message)

    logger.info(
        "Permit attached to %d booking(s) and %d lending record(s)",
        len(submission.booking_ids), len(submission.lending_ids),
    )
    return OperationResult(status="success", message=i18n.get_text(
        language, "Permit letter submitted successfully!", "Surat izin berhasil dikirim!",
    ))
