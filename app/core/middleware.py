import logging

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.config import Settings, settings as default_settings
from app.core.cookies import ResponseCookieTransport, build_set_cookie
from app.services.counter_store import CounterStore
from app.services.session_gate import SessionGate
from app.services.session_store import RequestSession, SessionStore, session_store
from app.services.tracking import RequestTracker, resolve_route_id

logger = logging.getLogger("tracking")


class TrackingMiddleware:
    """Counts sessions and route hits into the visitor's counter cookie.

    The cookie and session writes are attached to ``http.response.start``, the
    last moment at which headers can still be changed, so streamed responses
    are tracked as well. A response that never starts writes nothing.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore | None = None,
        config: Settings | None = None,
    ) -> None:
        self.app = app
        self.store = store or session_store
        self.config = config or default_settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        config = self.config
        cookies = HTTPConnection(scope).cookies
        session = RequestSession(
            self.store,
            cookies.get(config.session_cookie_name),
            config.session_idle_timeout_seconds,
        )
        transport = ResponseCookieTransport(cookies)
        counters = CounterStore(
            transport,
            cookie_name=config.counter_cookie_name,
            max_age=config.counter_cookie_max_age,
            path=config.cookie_path,
            samesite=config.cookie_samesite,
            secure=config.cookie_secure,
        )
        tracker = RequestTracker(
            counters,
            SessionGate(session),
            reset_session_actions=config.reset_session_actions,
        )
        scope.setdefault("state", {})["counter_store"] = counters

        tracker.before_dispatch()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                tracker.before_send(resolve_route_id(scope))
                headers = MutableHeaders(scope=message)
                for value in transport.set_cookie_headers():
                    headers.append("set-cookie", value)
                try:
                    if session.commit():
                        headers.append(
                            "set-cookie",
                            build_set_cookie(
                                config.session_cookie_name,
                                session.id,
                                path=config.cookie_path,
                                samesite=config.cookie_samesite,
                                secure=config.cookie_secure,
                                httponly=True,
                            ),
                        )
                except Exception:
                    logger.exception("session could not be saved")
            await send(message)

        await self.app(scope, receive, send_wrapper)
