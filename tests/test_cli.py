from __future__ import annotations

import io
import sys

import pytest

import mcrcon_cli
from mc_rcon import rcon

from conftest import auth_ok, auth_rejected, response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("MCRCON_HOST", "MCRCON_PORT", "MCRCON_PASS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))


def test_batch_run(rcon_server, capsys):
    srv = rcon_server(auth_ok(), response("§eThere are 0 players"), response("Saved the game"))
    code = mcrcon_cli.main(["-H", "127.0.0.1", "-P", str(srv.port), "-p", "secret", "-c", "list", "save-all"])
    srv.stop()
    assert code == 0
    assert capsys.readouterr().out == "There are 0 players\nSaved the game\n"


def test_options_after_commands(rcon_server, capsys, monkeypatch):
    monkeypatch.setenv("MCRCON_PORT", "1")
    srv = rcon_server(auth_ok(), response("ok"))
    code = mcrcon_cli.main(["list", "-r", "-P", str(srv.port), "-H", "127.0.0.1", "-p", "secret"])
    srv.stop()
    assert code == 0
    assert capsys.readouterr().out == "ok"


def test_password_from_environment(rcon_server, capsys, monkeypatch):
    srv = rcon_server(auth_ok(), response(""))
    monkeypatch.setenv("MCRCON_HOST", "127.0.0.1")
    monkeypatch.setenv("MCRCON_PORT", str(srv.port))
    monkeypatch.setenv("MCRCON_PASS", "from-env")
    assert mcrcon_cli.main(["save-all"]) == 0
    srv.stop()
    assert srv.requests[0].body == b"from-env"
    assert capsys.readouterr().out == ""


def test_terminal_mode_from_stdin(rcon_server, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("list\nq\n"))
    srv = rcon_server(auth_ok(), response("nobody"))
    code = mcrcon_cli.main(["-H", "127.0.0.1", "-P", str(srv.port), "-p", "secret", "-r"])
    srv.stop()
    assert code == 0
    out = capsys.readouterr().out
    assert out == "Logged in.\nType 'Q' or press Ctrl-D / Ctrl-C to disconnect.\n> nobody> "


def test_auth_failure(rcon_server, capsys):
    srv = rcon_server(auth_rejected())
    code = mcrcon_cli.main(["-H", "127.0.0.1", "-P", str(srv.port), "-p", "wrong", "list"])
    srv.stop()
    assert code == 1
    captured = capsys.readouterr()
    assert "Authentication failed: authentication rejected" in captured.err
    assert captured.out == ""


def test_connection_failure(capsys, monkeypatch):
    def refuse(address, timeout=None):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(rcon.socket, "create_connection", refuse)
    monkeypatch.setattr(rcon.time, "sleep", lambda s: None)
    assert mcrcon_cli.main(["-p", "pw", "list"]) == 1
    assert "Connection failed:" in capsys.readouterr().err


def test_missing_password(capsys):
    assert mcrcon_cli.main(["list"]) == 1
    assert "You must provide password" in capsys.readouterr().err


def test_bad_port(capsys):
    assert mcrcon_cli.main(["-P", "rcon", "-p", "pw", "list"]) == 1
    assert "invalid port" in capsys.readouterr().err


@pytest.mark.parametrize("wait", ["0", "601", "soon"])
def test_wait_out_of_range(wait, capsys):
    assert mcrcon_cli.main(["-p", "pw", "-w", wait, "list"]) == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("Error: ")
    assert "wait value" in captured.err
    assert captured.out == ""


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        mcrcon_cli.main(["-v"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("mcrcon ")
