"""Code review submission route."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from review_insights.config import Settings
from review_insights.dependencies import get_app_settings, get_db, get_review_acquirer
from review_insights.errors import UnauthorizedError, ValidationError
from review_insights.schemas import LANGUAGES, AnalysisMetadata, ReviewRequest
from review_insights.services.report_service import create_report, serialize_report
from review_insights.utils.languages import SUPPORTED_EXTENSIONS_TEXT, count_lines_of_code, is_supported_file

router = APIRouter(tags=["review"])


def _validate_submission(payload: ReviewRequest, max_bytes: int) -> None:
	if not payload.code or not payload.code.strip():
		raise ValidationError("Code content is required")
	if not payload.user_id:
		raise UnauthorizedError("User authentication required. Please login.")
	if not payload.language or payload.language not in LANGUAGES:
		raise ValidationError(f"Unsupported language: {payload.language or 'none'}")
	if not payload.file_name or not is_supported_file(payload.file_name):
		raise ValidationError(f"Invalid file type. Supported: {SUPPORTED_EXTENSIONS_TEXT}")
	if len(payload.code.encode("utf-8")) > max_bytes:
		raise ValidationError(f"Code exceeds maximum size of {max_bytes // 1024}KB")


@router.post("/review", summary="Review a source file and store the report")
def review_code(
	payload: ReviewRequest,
	request: Request,
	db: Session = Depends(get_db),
	settings: Settings = Depends(get_app_settings),
) -> dict:
	"""Run the model review, persist the result and return the stored report."""
	_validate_submission(payload, settings.max_upload_bytes)

	acquired = get_review_acquirer(request).acquire(payload.code, payload.language)
	metadata = AnalysisMetadata(
		lines_of_code=count_lines_of_code(payload.code),
		analysis_time=acquired.analysis_time_ms,
		model=acquired.model,
	)
	report = create_report(
		db,
		file_name=payload.file_name,
		language=payload.language,
		original_code=payload.code,
		review=acquired.review,
		metadata=metadata,
		user_id=payload.user_id,
		session_id=payload.session_id or "unknown",
		device_id=payload.device_id or "unknown",
		device_name=payload.device_name or "Unknown Device",
	)
	return {"success": True, "report": serialize_report(report)}
