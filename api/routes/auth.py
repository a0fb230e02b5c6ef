"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /auth/register  -- create an account; 201 {message}
  POST /auth/login     -- check credentials; 200 {message, token}

Auth policy: both routes are public -- they are how a client gets a token.

Errors are raised by AccountService as AppError subclasses and rendered by the
handler in api/main.py:
  register: 400 duplicate username, 400 invalid body, 500 store failure
  login:    404 unknown username, 400 wrong password, 400 invalid body,
            500 store failure

Handlers are plain def functions. FastAPI runs them in its threadpool, so
bcrypt and blocking SQL calls never stall the event loop.

Security:
  Cache-Control: no-store on login responses, success or failure.
  The password hash never appears in any response model.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.models import LoginRequest, LoginResponse, MessageResponse, RegisterRequest
from auth.service import AccountService

router = APIRouter()


@router.post("/auth/register", response_model=MessageResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> MessageResponse:
    """Create a new user account."""
    accounts: AccountService = request.app.state.accounts
    accounts.register(
        username=body.username,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return MessageResponse(message="User has been created successfully.")


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest, response: Response) -> LoginResponse:
    """Authenticate with username and password; return a bearer token."""
    accounts: AccountService = request.app.state.accounts
    token = accounts.login(body.username, body.password)
    # Failures get the same header from the AppError handler.
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(message="Login successfully.", token=token)
