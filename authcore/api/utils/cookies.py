from fastapi import Response

from config import ApplicationConfig


def set_session_cookie(response: Response, session_token: str) -> None:
    """
    Attach the session token as a cookie.

    HttpOnly keeps it away from page scripts, SameSite=Strict keeps it off
    cross-site requests and Secure restricts it to encrypted transport.
    """
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=session_token,
        max_age=ApplicationConfig.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="strict",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="strict",
        path="/",
    )
