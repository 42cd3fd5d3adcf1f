import re

from config import ApplicationConfig


def session_cookie_from(response) -> str:
    """Session token carried by a response's Set-Cookie header"""
    header = response.headers["set-cookie"]
    match = re.search(rf"{ApplicationConfig.SESSION_COOKIE_NAME}=([^;]+)", header)
    assert match, f"No session cookie in {header!r}"
    return match.group(1)


def cookie_header(token: str) -> dict:
    # Session cookies are Secure, so the test client won't replay them over http
    return {"Cookie": f"{ApplicationConfig.SESSION_COOKIE_NAME}={token}"}
