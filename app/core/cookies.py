from __future__ import annotations

import http.cookies
from typing import Mapping, Protocol


class CookieTransport(Protocol):
    def get(self, name: str) -> str | None: ...
    def set(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        samesite: str = "lax",
        secure: bool = False,
        httponly: bool = False,
    ) -> None: ...


def build_set_cookie(
    name: str,
    value: str,
    *,
    max_age: int | None = None,
    path: str = "/",
    samesite: str = "lax",
    secure: bool = False,
    httponly: bool = False,
) -> str:
    cookie: http.cookies.BaseCookie[str] = http.cookies.SimpleCookie()
    cookie[name] = value
    if max_age is not None:
        cookie[name]["max-age"] = max_age
        # an int expires is rendered by SimpleCookie as now + max_age
        cookie[name]["expires"] = max_age
    cookie[name]["path"] = path
    cookie[name]["samesite"] = samesite.capitalize()
    if secure:
        cookie[name]["secure"] = True
    if httponly:
        cookie[name]["httponly"] = True
    return cookie.output(header="").strip()


class ResponseCookieTransport:
    """Request cookies in, buffered Set-Cookie headers out.

    Reads see pending writes from the same request, so several read-modify-write
    cycles within one request build on each other. Headers are only rendered
    when the response is about to start.
    """

    def __init__(self, request_cookies: Mapping[str, str]):
        self._request_cookies = dict(request_cookies)
        self._pending: dict[str, str] = {}
        self._headers: dict[str, str] = {}

    def get(self, name: str) -> str | None:
        if name in self._pending:
            return self._pending[name]
        return self._request_cookies.get(name)

    def set(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        samesite: str = "lax",
        secure: bool = False,
        httponly: bool = False,
    ) -> None:
        self._pending[name] = value
        self._headers[name] = build_set_cookie(
            name,
            value,
            max_age=max_age,
            path=path,
            samesite=samesite,
            secure=secure,
            httponly=httponly,
        )

    @property
    def dirty(self) -> bool:
        return bool(self._headers)

    def set_cookie_headers(self) -> list[str]:
        return list(self._headers.values())
