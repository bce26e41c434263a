"""Read-modify-write access to the counter mapping held in one cookie."""
from __future__ import annotations

import logging
from typing import Mapping

from app.core.cookies import CookieTransport
from app.services import codec
from app.services.counters import bump, drop_namespace, total_actions_key

logger = logging.getLogger("tracking")

# Browsers drop or truncate cookies above this size.
MAX_COOKIE_BYTES = 4096


class CounterStore:
    def __init__(
        self,
        transport: CookieTransport,
        *,
        cookie_name: str = "UserActions",
        max_age: int = 730 * 24 * 60 * 60,
        path: str = "/",
        samesite: str = "lax",
        secure: bool = False,
    ):
        self.transport = transport
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.path = path
        self.samesite = samesite
        self.secure = secure

    def read(self) -> dict[str, int]:
        try:
            return codec.decode(self.transport.get(self.cookie_name))
        except Exception:
            logger.exception("counter cookie could not be read")
            return {}

    def write(self, mapping: Mapping[str, int]) -> None:
        value = codec.encode(mapping)
        size = len(self.cookie_name) + len(value.encode("utf-8"))
        if size > MAX_COOKIE_BYTES:
            # Known limitation: the mapping grows with every distinct route.
            logger.warning(
                "counter cookie exceeds browser size limit",
                extra={"event": {"bytes": size, "counters": len(mapping)}},
            )
        self.transport.set(
            self.cookie_name,
            value,
            max_age=self.max_age,
            path=self.path,
            samesite=self.samesite,
            secure=self.secure,
        )

    def increment(self, *names: str) -> None:
        """Bump every named counter in one read-modify-write."""
        mapping = self.read()
        for name in names:
            mapping = bump(mapping, name)
        self.write(mapping)

    def reset_namespace(self, prefix: str) -> None:
        self.write(drop_namespace(self.read(), prefix))

    def get(self, name: str) -> int | None:
        return self.read().get(name)

    def get_action_count(self, route_id: str) -> int | None:
        return self.get(total_actions_key(route_id))
