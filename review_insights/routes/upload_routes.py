"""File upload route: validates a source file and detects its language."""

from fastapi import APIRouter, Depends, File, UploadFile

from review_insights.config import Settings
from review_insights.dependencies import get_app_settings
from review_insights.errors import ValidationError
from review_insights.utils.languages import SUPPORTED_EXTENSIONS_TEXT, detect_language, format_file_size

router = APIRouter(tags=["upload"])


@router.post("/upload", summary="Upload a source file for review")
async def upload_file(
	file: UploadFile = File(...),
	settings: Settings = Depends(get_app_settings),
) -> dict:
	"""Return the decoded file content with its detected language.

	Nothing is stored: the client submits the content to /review afterwards.
	"""
	file_name = file.filename or ""
	language = detect_language(file_name)
	if language is None:
		raise ValidationError(f"Invalid file type. Supported: {SUPPORTED_EXTENSIONS_TEXT}")

	raw = await file.read(settings.max_upload_bytes + 1)
	if len(raw) > settings.max_upload_bytes:
		raise ValidationError(f"File too large. Maximum size: {format_file_size(settings.max_upload_bytes)}")

	try:
		content = raw.decode("utf-8")
	except UnicodeDecodeError as exc:
		raise ValidationError("File must be UTF-8 encoded text") from exc

	return {
		"success": True,
		"file": {
			"name": file_name,
			"content": content,
			"language": language.value,
			"size": len(raw),
		},
	}
