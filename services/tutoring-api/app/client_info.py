"""Caller metadata extraction."""

from fastapi import Request

from app.models import ClientInfo


def extract_client(request: Request) -> ClientInfo:
    """
    Build the client metadata stored alongside a submission.

    The first ``X-Forwarded-For`` hop wins over the socket peer address so
    that requests relayed through the hosting proxy keep the caller's IP.
    """
    forwarded = request.headers.get("x-forwarded-for")
    ip = ""
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    if not ip and request.client:
        ip = request.client.host or ""

    return ClientInfo(ip=ip, user_agent=request.headers.get("user-agent", ""))
