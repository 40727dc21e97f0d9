from fastapi import APIRouter, Request, Form, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
import structlog
from sqlalchemy.orm import Session
from app.core.identity import SESSION_COOKIE, issue_token
from app.core.config import get_settings
from app.core.templating import templates
from app.models.database import get_db
from app.models.user import User
from werkzeug.security import generate_password_hash, check_password_hash

router = APIRouter()
logger = structlog.get_logger()


def _login_response(user: User) -> RedirectResponse:
    response = RedirectResponse(url="/files", status_code=303)
    response.set_cookie(
        SESSION_COOKIE,
        issue_token(user.id),
        max_age=get_settings().auth_token_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/signup", response_class=HTMLResponse)
def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html", {})


@router.post("/signup")
def signup(request: Request, username: str = Form(...), password: str = Form(...), db: Session = Depends(get_db)):
    username = username.strip()
    if not username or not password:
        return templates.TemplateResponse(
            request, "signup.html", {"error": "Username and password are required"}, status_code=400
        )

    # Check if user exists
    existing_user = db.query(User).filter(User.username == username).first()
    if existing_user:
        return templates.TemplateResponse(
            request, "signup.html", {"error": "Username already exists"}, status_code=400
        )

    # Hash password
    hashed_pw = generate_password_hash(password)

    # Save user
    new_user = User(username=username, password=hashed_pw)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("user_signed_up", user_id=new_user.id)

    # Signing up also logs you in
    return _login_response(new_user)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/login")
def login(request: Request, username: str = Form(...), password: str = Form(...), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == username.strip()).first()

    if not user or not check_password_hash(user.password, password):
        logger.info("login_failed", username=username)
        return templates.TemplateResponse(
            request, "login.html", {"error": "Invalid credentials"}, status_code=401
        )

    # login success → set the session cookie
    logger.info("user_logged_in", user_id=user.id)
    return _login_response(user)


@router.post("/logout")
def logout():
    response = RedirectResponse(url="/", status_code=303)
    response.delete_cookie(SESSION_COOKIE)
    return response
