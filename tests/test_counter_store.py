import logging
from http.cookies import SimpleCookie

from app.core.cookies import ResponseCookieTransport, build_set_cookie
from app.services.counter_store import CounterStore


def _store(cookies=None) -> tuple[CounterStore, ResponseCookieTransport]:
    transport = ResponseCookieTransport(cookies or {})
    return CounterStore(transport, cookie_name="UserActions"), transport


def test_read_missing_cookie_is_empty():
    store, transport = _store()
    assert store.read() == {}
    assert not transport.dirty


def test_read_corrupt_cookie_is_empty():
    store, _ = _store({"UserActions": "%%%garbage"})
    assert store.read() == {}


def test_increments_within_one_request_accumulate():
    store, transport = _store({"UserActions": '{"totalSessions":1}'})
    store.increment("totalSessions")
    store.increment("totalActions/Home/Index")
    store.increment("totalActions/Home/Index")
    assert store.read() == {"totalSessions": 2, "totalActions/Home/Index": 2}
    headers = transport.set_cookie_headers()
    assert len(headers) == 1
    assert headers[0].startswith("UserActions=")


def test_write_sets_cookie_policy():
    store, transport = _store()
    store.write({"totalSessions": 1})
    header = transport.set_cookie_headers()[0]
    assert "Path=/" in header
    assert "SameSite=Lax" in header
    assert f"Max-Age={730 * 24 * 60 * 60}" in header
    assert "expires=" in header.lower()
    assert "HttpOnly" not in header


def test_set_cookie_value_round_trips_through_cookie_parser():
    store, transport = _store()
    store.write({"totalActions/Home/Index": 3, "totalSessions": 1})
    cookie = SimpleCookie()
    cookie.load(transport.set_cookie_headers()[0])
    reread, _ = _store({"UserActions": cookie["UserActions"].value})
    assert reread.read() == {"totalActions/Home/Index": 3, "totalSessions": 1}


def test_reset_namespace_only_clears_prefix():
    store, _ = _store(
        {
            "UserActions": '{"totalSessions":1,"totalActions/Home/Index":2,'
            '"sessionActions/Home/Index":2}'
        }
    )
    store.reset_namespace("sessionActions/")
    assert store.read() == {"totalSessions": 1, "totalActions/Home/Index": 2}


def test_get_action_count_distinguishes_never_visited():
    store, _ = _store({"UserActions": '{"totalActions/Home/Index":2}'})
    assert store.get_action_count("Home/Index") == 2
    assert store.get_action_count("Other/Index") is None
    assert store.get("totalSessions") is None


def test_unreadable_counter_reads_as_absent():
    store, _ = _store({"UserActions": '{"totalActions/Home/Index":"two"}'})
    assert store.get_action_count("Home/Index") is None


def test_oversized_cookie_is_written_with_warning(caplog):
    caplog.set_level(logging.WARNING, logger="tracking")
    store, transport = _store()
    mapping = {f"totalActions/Group{i}/Action{i}": i for i in range(300)}
    store.write(mapping)
    assert transport.dirty
    assert any(r.getMessage() == "counter cookie exceeds browser size limit" for r in caplog.records)


def test_build_set_cookie_flags():
    header = build_set_cookie("session_id", "abc", httponly=True, secure=True, samesite="strict")
    assert header.startswith("session_id=abc")
    assert "HttpOnly" in header
    assert "Secure" in header
    assert "SameSite=Strict" in header
    assert "expires" not in header.lower()


def test_increment_several_counters_in_one_write():
    store, transport = _store({"UserActions": '{"totalActions/Home/Index":1}'})
    store.increment("totalActions/Home/Index", "sessionActions/Home/Index")
    assert store.read() == {"totalActions/Home/Index": 2, "sessionActions/Home/Index": 1}
    assert len(transport.set_cookie_headers()) == 1


def test_read_survives_deeply_nested_cookie():
    store, _ = _store({"UserActions": "[" * 3000})
    assert store.read() == {}
    assert store.get_action_count("Home/Index") is None
