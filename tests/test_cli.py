"""Tests for the auth login/logout/status commands."""

import logging
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from cli.main import build_parser, main
from oauth import CredentialManager, CredentialStore, TokenResponse
from settings import TOKEN_URL
from conftest import token_json


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; put pytest's handlers back afterwards"""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def _seed(data_dir, **kwargs):
    manager = CredentialManager(store=CredentialStore(str(data_dir)))
    manager.store(TokenResponse(**token_json(**kwargs)))
    manager.close()


class TestParser:

    def test_auth_subcommands(self):
        args = build_parser().parse_args(["--data-dir", "/tmp/x", "auth", "login", "--force"])
        assert args.auth_command == "login"
        assert args.force is True
        assert args.data_dir == "/tmp/x"

    def test_auth_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["auth"])


class TestStatusCommand:

    def test_without_credentials(self, data_dir, capsys):
        assert main(["--data-dir", str(data_dir), "auth", "status"]) == 1
        assert "NO AUTH" in capsys.readouterr().out

    def test_with_credentials(self, data_dir, capsys):
        _seed(data_dir)
        assert main(["--data-dir", str(data_dir), "auth", "status"]) == 0
        output = capsys.readouterr().out
        assert "VALID" in output
        assert "access-1" not in output

    def test_corrupt_file_is_reported(self, data_dir, capsys):
        data_dir.mkdir(parents=True)
        (data_dir / "auth.json").write_text("{broken")
        assert main(["--data-dir", str(data_dir), "auth", "status"]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_non_utf8_file_is_reported(self, data_dir, capsys):
        data_dir.mkdir(parents=True)
        (data_dir / "auth.json").write_bytes(b'{"claudesub": "\xff\xfe"}')
        assert main(["--data-dir", str(data_dir), "auth", "status"]) == 1
        assert "ERROR" in capsys.readouterr().out


class TestLogoutCommand:

    def test_logout_removes_credentials(self, data_dir):
        _seed(data_dir)
        assert main(["--data-dir", str(data_dir), "auth", "logout"]) == 0
        assert not CredentialManager(store=CredentialStore(str(data_dir))).has_auth()

    def test_logout_without_credentials(self, data_dir, capsys):
        assert main(["--data-dir", str(data_dir), "auth", "logout"]) == 0
        assert "No stored credentials" in capsys.readouterr().out


class TestLoginCommand:

    def test_already_authenticated(self, data_dir, mock_router, capsys):
        route = mock_router.post(TOKEN_URL)
        _seed(data_dir)

        assert main(["--data-dir", str(data_dir), "auth", "login"]) == 0
        assert not route.called
        assert "Already authenticated" in capsys.readouterr().out

    def test_browser_flow(self, data_dir, mock_router, monkeypatch):
        route = mock_router.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_json(access="access-login"))
        )
        opened = {}

        def fake_open_browser(url):
            opened["url"] = url
            return False

        def fake_input(prompt=""):
            state = parse_qs(urlparse(opened["url"]).query)["state"][0]
            return f"the-code#{state}"

        monkeypatch.setattr("oauth.client.open_browser", fake_open_browser)
        monkeypatch.setattr("builtins.input", fake_input)

        assert main(["--data-dir", str(data_dir), "auth", "login"]) == 0

        assert route.call_count == 1
        manager = CredentialManager(store=CredentialStore(str(data_dir)))
        assert manager.get().access == "access-login"
        manager.close()

    def test_cancelled_login(self, data_dir, mock_router, monkeypatch):
        route = mock_router.post(TOKEN_URL)

        def cancel(prompt=""):
            raise KeyboardInterrupt

        monkeypatch.setattr("oauth.client.open_browser", lambda url: False)
        monkeypatch.setattr("builtins.input", cancel)

        assert main(["--data-dir", str(data_dir), "auth", "login"]) == 1
        assert not route.called


class TestCorruptCredentialFile:

    @pytest.fixture
    def corrupt_file(self, data_dir):
        data_dir.mkdir(parents=True)
        auth_file = data_dir / "auth.json"
        auth_file.write_text("{broken")
        return auth_file

    @pytest.mark.parametrize("command", [["logout"], ["login", "--force"], ["refresh"]])
    def test_points_at_the_file_to_remove(self, data_dir, corrupt_file, mock_router, monkeypatch, capsys, command):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        opened = {}

        def fake_open_browser(url):
            opened["url"] = url
            return False

        def fake_input(prompt=""):
            state = parse_qs(urlparse(opened["url"]).query)["state"][0]
            return f"the-code#{state}"

        monkeypatch.setattr("oauth.client.open_browser", fake_open_browser)
        monkeypatch.setattr("builtins.input", fake_input)

        assert main(["--data-dir", str(data_dir), "auth", *command]) == 1

        # Rich wraps long paths across lines
        output = "".join(capsys.readouterr().out.split())
        assert f"Remove{corrupt_file}" in output
        assert route.called == (command[0] == "login")
        assert corrupt_file.read_text() == "{broken"
