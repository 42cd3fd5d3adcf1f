from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Cookie, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from authcore.api.error import ClientError, ServerError
from authcore.api.utils.cookies import clear_session_cookie, set_session_cookie
from authcore.app.use_cases.auth import (
    AccountInfo,
    AuthGateway,
    ConfirmPasswordResetResponse,
    RegisterCommand,
    RequestPasswordResetResponse,
)
from authcore.depends import get_auth_gateway, get_partition_key
from authcore.libs.result import Error

router = APIRouter(tags=["Authentication"])


def raise_rate_limited(error: Error, retry_after: int):
    raise ClientError(
        error,
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
    )


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    Password strength is checked by the use case.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")
    display_name: str = Field(
        ..., min_length=1, max_length=255, alias="displayName", description="Display name"
    )
    phone: Optional[str] = Field(default=None, max_length=32, description="Phone number")

    model_config = {"populate_by_name": True}


class RegisterResponse(BaseModel):
    status: str
    account: AccountInfo


@router.post("/register", status_code=status.HTTP_200_OK, response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Register

    Creates an account, stores the display name as a profile claim and
    signs the new account in (session cookie).

    Raises:
        - 400 Bad Request: Invalid input, weak password or duplicate email
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(
        email=request.email,
        password=request.password,
        display_name=request.display_name,
        phone=request.phone,
    )
    result = await gateway.register(command)

    if result.is_err():
        error = result.error
        if error.code in ("DUPLICATE_EMAIL", "WEAK_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    set_session_cookie(response, result.value.session_token)
    return RegisterResponse(status="registered", account=result.value.account)


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., max_length=128, description="Account password")


class LoginResponse(BaseModel):
    status: str
    account_id: str


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    result = await gateway.login(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    set_session_cookie(response, result.value.session_token)
    return LoginResponse(status="signed_in", account_id=result.value.account_id)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response):
    clear_session_cookie(response)
    return {"status": "signed_out"}


@router.get("/me", status_code=status.HTTP_200_OK, response_model=AccountInfo)
async def me(
    session_token: Optional[str] = Cookie(default=None, alias=ApplicationConfig.SESSION_COOKIE_NAME),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Current account profile, resolved from the session cookie

    Raises:
        - 401 Unauthorized: Missing, invalid, expired or revoked session
    """
    if not session_token:
        raise ClientError(
            Error("SESSION_INVALID", "Session is invalid or expired"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await gateway.current_account(session_token)

    if result.is_err():
        error = result.error
        if error.code == "SESSION_INVALID":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    partition_key: str = Depends(get_partition_key),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Request Password Reset

    Mails a one-time reset code to the account's address.

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - The email goes out after the response is sent, so timing matches too
        - Rate limited per client address

    Returns:
        - 200 OK: Always, unless rate limited
        - 429 Too Many Requests: Rate limit window exhausted
    """
    result = await gateway.request_password_reset(
        request.email, partition_key, schedule=background_tasks.add_task
    )

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMITED":
            raise_rate_limited(error, gateway.rate_limiter.seconds_until_reset())
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")
    code: str = Field(..., min_length=1, max_length=32, description="Reset code from email")
    new_password: str = Field(
        ..., min_length=1, max_length=128, alias="newPassword", description="New password"
    )

    model_config = {"populate_by_name": True}


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    partition_key: str = Depends(get_partition_key),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Confirm Password Reset

    Security:
        - Unknown account and wrong/expired/used code are indistinguishable
        - Password update and code consumption are atomic
        - Sessions issued before the reset stop resolving

    Raises:
        - 400 Bad Request: Invalid or expired code, or weak password
        - 429 Too Many Requests: Rate limit window exhausted
    """
    result = await gateway.confirm_password_reset(
        request.email, request.code, request.new_password, partition_key
    )

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMITED":
            raise_rate_limited(error, gateway.rate_limiter.seconds_until_reset())
        elif error.code in ("INVALID_TOKEN", "WEAK_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
