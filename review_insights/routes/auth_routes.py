"""Identity and session API route declarations."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from review_insights.dependencies import get_db
from review_insights.schemas import EmailRequest, LogoutRequest, VerifyRequest
from review_insights.services import session_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", summary="Create or reuse an identity for an email")
def signup(payload: EmailRequest, db: Session = Depends(get_db)) -> JSONResponse:
	"""201 for a new identity, 200 when the email was already registered."""
	user_session, created = session_service.signup(db, payload.email)
	return JSONResponse(
		status_code=201 if created else 200,
		content={
			"success": True,
			"user": session_service.serialize_user(user_session),
			"message": "Account created successfully!" if created else "Welcome back!",
		},
	)


@router.post("/login", summary="Reactivate the identity for an email")
def login(payload: EmailRequest, db: Session = Depends(get_db)) -> dict:
	user_session = session_service.login(db, payload.email)
	return {
		"success": True,
		"user": session_service.serialize_user(user_session),
		"message": "Logged in successfully!",
	}


@router.post("/logout", summary="Deactivate an identity")
def logout(payload: LogoutRequest, db: Session = Depends(get_db)) -> dict:
	session_service.logout(db, payload.user_id)
	return {"success": True, "message": "Logged out successfully"}


@router.post("/verify", summary="Check that a user and session pair is active")
def verify(payload: VerifyRequest, db: Session = Depends(get_db)) -> dict:
	user_session = session_service.verify(db, payload.user_id, payload.session_id)
	return {"success": True, "user": session_service.serialize_user(user_session)}
