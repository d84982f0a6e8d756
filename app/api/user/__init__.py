from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from app.models.user import User
from app.services import auth, avatar, mailer, users
from app.services.auth import Session, get_current_session, get_current_user
from app.services.rate_limit import limit_route
from app.utils.base import OpenBody
from app.utils.config import settings


router = APIRouter()


class SignupBody(OpenBody):
    name: str
    email: str
    password: str
    age: int = 0


class LoginBody(BaseModel):
    email: str
    password: str


class ProfileUpdateBody(OpenBody):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    age: int | None = None


@router.post("", status_code=201)
def signup(body: SignupBody) -> dict:
    """PUBLIC: Register and log in on the new account."""
    user = users.register(body.supplied())
    mailer.send_welcome_email(user.email, user.name)
    token = auth.issue(user)
    return {"user": user.to_output(), "token": token}


@router.post("/login")
def login(body: LoginBody) -> dict:
    """PUBLIC: Exchange credentials for a new session token."""
    user = users.find_by_credentials(body.email, body.password)
    token = auth.issue(user)
    return {"user": user.to_output(), "token": token}


@router.post("/logout")
def logout(session: Session = Depends(get_current_session)) -> dict:
    """PROTECTED: End the session that made this request."""
    auth.revoke(session.user, session.token)
    return {}


@router.post("/logoutAll")
def logout_all(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: End every session of the current user."""
    auth.revoke_all(current_user)
    return {}


@router.get("/me")
def read_profile(current_user: User = Depends(get_current_user)) -> dict:
    return current_user.to_output()


@router.patch("/me")
def update_profile(body: ProfileUpdateBody, current_user: User = Depends(get_current_user)) -> dict:
    user = users.update_profile(current_user, body.supplied())
    return user.to_output()


@router.delete("/me")
def delete_account(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Delete the account and all of its tasks."""
    output = current_user.to_output()
    users.delete_account(current_user)
    mailer.send_cancel_email(current_user.email, current_user.name)
    return output


@router.post(
    "/me/avatar",
    dependencies=[Depends(limit_route(settings.avatar_upload_cooldown_seconds))],
)
def upload_avatar(
    avatar_file: UploadFile = File(..., alias="avatar"),
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED | RATE-LIMITED: Store a 250x250 PNG of the uploaded image."""
    # Read one byte past the limit so oversized files are detectable
    data = avatar_file.file.read(avatar.MAX_FILE_SIZE + 1)
    users.set_avatar(current_user, avatar.process_upload(avatar_file.filename, data))
    return {}


@router.delete("/me/avatar")
def delete_avatar(current_user: User = Depends(get_current_user)) -> dict:
    users.clear_avatar(current_user)
    return {}


@router.get("/{user_id}/avatar")
def read_avatar(user_id: str) -> Response:
    """PUBLIC: Serve a user's avatar as PNG."""
    return Response(content=users.get_avatar(user_id), media_type="image/png")
