"""
CLI sub-commands, run against the scripted transport.
"""
import argparse

import pytest

from fscloud.cli import build_parser, main, run
from fscloud.session_store import TokenStore


def _args(*argv):
    return build_parser().parse_args(list(argv))


def test_parser_defaults(monkeypatch):
    monkeypatch.delenv("FSCLOUD_SESSION_PATH", raising=False)
    args = _args("ls")
    assert args.cmd == "ls"
    assert args.session == ".fscloud/session.json"
    assert args.search == ""


def test_login_persists_session(client, server, tmp_path, capsys):
    server.add("POST", "/api/auth/login", (200, {"accessToken": "a", "refreshToken": "r"}))
    path = str(tmp_path / "s.json")

    code = run(_args("--session", path, "login", "u@x", "--password", "pw"), client, TokenStore(path))

    assert code == 0
    assert TokenStore(path).load().access_token == "a"
    assert "session saved" in capsys.readouterr().out


def test_ls_prints_items(client, server, store, capsys):
    server.add("GET", "/api/files", (200, [
        {"_id": "d1", "name": "Docs", "type": "folder"},
        {"_id": "f1", "name": "a.txt", "size": 2048},
    ]))

    code = run(_args("--session", store.path, "ls"), client, store)

    out = capsys.readouterr().out
    assert code == 0
    assert "d d1" in out
    assert "2.00KB" in out
    assert "a.txt" in out


def test_mkdir_refreshes_expired_token(client, server, store, capsys):
    server.add("POST", "/api/files/folder", (401, None), (201, {"_id": "f1", "name": "Docs"}))
    server.add("POST", "/api/auth/refresh-token", (200, {"accessToken": "access-2"}))

    code = run(_args("--session", store.path, "mkdir", "Docs"), client, store)

    assert code == 0
    assert "id=f1" in capsys.readouterr().out
    assert TokenStore(store.path).load().access_token == "access-2"


def test_mkdir_blank_name(client, server, store, capsys):
    code = run(_args("--session", store.path, "mkdir", "   "), client, store)

    assert code == 1
    assert "Folder name is required" in capsys.readouterr().err
    assert server.requests == []


def test_logout_clears_even_on_failure(client, server, store, capsys):
    server.add("POST", "/api/auth/logout", (500, None))

    code = run(_args("--session", store.path, "logout"), client, store)

    assert code == 0
    assert TokenStore(store.path).load().access_token is None


@pytest.mark.parametrize("content", ["{not json", '{"tokens": ["a", "b"]}', "[1, 2]"])
def test_corrupt_session_file_means_logged_out(monkeypatch, tmp_path, capsys, content):
    monkeypatch.setenv("FSCLOUD_HTTP_LOG", "")
    path = tmp_path / "s.json"
    path.write_text(content, encoding="utf-8")

    code = main(["--session", str(path), "ls"])

    assert code == 1
    assert "Please log in first" in capsys.readouterr().err
    assert not path.exists()


def test_corrupt_session_file_still_allows_login(client, server, tmp_path):
    server.add("POST", "/api/auth/login", (200, {"accessToken": "a", "refreshToken": "r"}))
    path = tmp_path / "s.json"
    path.write_text("{not json", encoding="utf-8")

    code = run(_args("--session", str(path), "login", "u@x", "--password", "pw"), client, TokenStore(str(path)))

    assert code == 0
    assert TokenStore(str(path)).load().access_token == "a"


def test_ls_tolerates_odd_sizes(client, server, store, capsys):
    server.add("GET", "/api/files", (200, [
        {"_id": "f1", "name": "a.txt", "size": "n/a"},
        {"_id": "f2", "name": "b.txt", "size": "1024.0"},
    ]))

    code = run(_args("--session", store.path, "ls"), client, store)

    out = capsys.readouterr().out
    assert code == 0
    assert "0.00B" in out
    assert "1.00KB" in out


def test_unknown_command_returns_error(client, store):
    args = argparse.Namespace(cmd="nope", session=store.path)
    assert run(args, client, store) == 1
