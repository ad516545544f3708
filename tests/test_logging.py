import io
import json
import logging

import pytest

from zypp_sdk import logging as zlog


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    zlog.clear_context()
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    zlog.clear_context()


def test_json_lines_carry_context_and_extras():
    buf = io.StringIO()
    zlog.configure(json=True, level="INFO", stream=buf)
    log = zlog.get_logger("zypp_sdk.test")
    with zlog.trace_scope("trace123"):
        zlog.bind(network="devnet")
        log.info("relayed", extra={"signature": "SIG", "raw": b"\x01\x02"})
    line = json.loads(buf.getvalue().strip())
    assert line["msg"] == "relayed"
    assert line["level"] == "INFO"
    assert line["trace_id"] == "trace123"
    assert line["network"] == "devnet"
    assert line["signature"] == "SIG"
    assert line["raw"] == "0102"


def test_trace_scope_restores_previous_context():
    zlog.bind(network="testnet")
    with zlog.trace_scope() as tid:
        assert zlog.context()["trace_id"] == tid
    assert zlog.context() == {"network": "testnet"}


def test_text_format_and_level_filtering():
    buf = io.StringIO()
    zlog.configure(json=False, level="WARNING", stream=buf)
    log = zlog.get_logger("zypp_sdk.test")
    log.info("hidden")
    log.warning("shown", extra={"attempt": 2})
    out = buf.getvalue()
    assert "hidden" not in out
    assert "WARNING" in out
    assert "attempt=2" in out
    assert out.rstrip().endswith("| shown")


def test_exceptions_are_rendered():
    buf = io.StringIO()
    zlog.configure(json=True, level="INFO", stream=buf)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        zlog.get_logger("zypp_sdk.test").exception("failed")
    line = json.loads(buf.getvalue().strip())
    assert "RuntimeError: boom" in line["err"]
