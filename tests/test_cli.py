import json
import logging

import pytest

from conftest import FakeRpc
from zypp_sdk import envelope
import zypp_sdk.cli.main as cli_main
from zypp_sdk.cli.main import main

NOW = 1_700_000_000


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    for key in ("NETWORK", "RPC_URL", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"ZYPP_{key}", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture
def fake(monkeypatch):
    rpc = FakeRpc()
    monkeypatch.setattr(cli_main, "_client", lambda cfg: rpc)
    return rpc


@pytest.fixture
def package_file(tmp_path, addr_a, addr_b, key_a):
    header = {
        "id": "pkg-cli",
        "type": "message",
        "version": "1.0",
        "createdAt": NOW,
        "sender": addr_a,
        "recipient": addr_b,
    }
    pkg = envelope.sign(envelope.encode(header, {"network": "devnet"}, envelope.make_payload(b"hi")), key_a)
    path = tmp_path / "package.json"
    path.write_text(envelope.dumps(pkg))
    return path


def test_version(capsys):
    assert main(["version"]) == 0
    assert capsys.readouterr().out.startswith("zypp-sdk ")


def test_envelope_verify_ok(package_file, capsys):
    rc = main(["--log-level", "ERROR", "envelope-verify", str(package_file), "--now", str(NOW)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"verified": True, "id": "pkg-cli", "type": "message", "signatures": 1}


def test_envelope_verify_tampered(package_file, capsys):
    doc = json.loads(package_file.read_text())
    doc["payload"]["data"] = "aGo="  # "hj"
    package_file.write_text(json.dumps(doc))
    rc = main(["--log-level", "ERROR", "envelope-verify", str(package_file), "--now", str(NOW)])
    assert rc == 1
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["error"] == "envelope"
    assert err["reason"] == "checksum_mismatch"


def test_build_rejects_zero_amount_without_network(fake, addr_a, addr_b, capsys):
    rc = main(["--log-level", "ERROR", "build", addr_a, addr_b, "0"])
    assert rc == 1
    assert fake.calls == []
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["error"] == "validation"
    assert err["field"] == "amount"


def test_balance_prints_json(fake, addr_a, capsys):
    fake.on("getBalance", {"context": {"slot": 1}, "value": 1_500_000_000})
    rc = main(["--log-level", "ERROR", "balance", addr_a])
    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"balance": "1.5", "account": addr_a, "unit": "SOL"}
    assert fake.closed


def test_airdrop_on_mainnet_is_refused(fake, addr_a, capsys):
    rc = main(["--log-level", "ERROR", "--network", "mainnet", "airdrop", addr_a, "1"])
    assert rc == 1
    assert fake.calls == []
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["field"] == "network"


def test_bad_network_flag_is_an_error(capsys):
    assert main(["--network", "moonnet", "version"]) != 0
