"""Tests for the settings layer and the .env reader."""

from __future__ import annotations

from pathlib import Path

import pytest

from goplay_irc.config import ConfigError, Formatter, Settings
from goplay_irc.config import settings as settings_module
from goplay_irc.util import EnvFile, reset_all_singletons


class TestDefaults:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.nick == "goplay"
        assert s.user == "goplay"
        assert s.real_name == "goplay"
        assert s.command_prefix == "~"
        assert s.join_channels == ()
        assert s.use_tls is False
        assert s.sasl_enabled is False
        assert s.playground_url == "https://play.golang.org"
        assert s.playground_timeout == 30.0
        assert s.formatter is Formatter.playground
        assert s.version_response.startswith("goplay-irc ")

    def test_user_and_real_name_follow_nick(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IRC_NICK", "gobot")
        s = Settings()
        assert (s.user, s.real_name) == ("gobot", "gobot")


class TestSources:
    def test_env_file_wins_over_environment(self, env_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_path.write_text("IRC_NICK=fromfile\n")
        monkeypatch.setenv("IRC_NICK", "fromenv")
        assert Settings().nick == "fromfile"

    def test_environment_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMMAND_PREFIX", "!")
        assert Settings().command_prefix == "!"

    def test_data_dir_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DOTENV_PATH")
        (tmp_path / "data" / ".env").write_text("IRC_NICK=datadir\n")
        assert Settings().nick == "datadir"

    def test_reload_picks_up_changes(self, env_path: Path) -> None:
        s = Settings()
        env_path.write_text("IRC_NICK=later\n")
        s.reload()
        assert s.nick == "later"

    def test_singleton_reset(self, env_path: Path) -> None:
        env_path.write_text("IRC_NICK=fresh\n")
        reset_all_singletons()
        assert settings_module.cfg.nick == "fresh"


class TestParsing:
    def test_join_channels(self, env_path: Path) -> None:
        env_path.write_text("IRC_JOIN_CHANNELS= #go-nuts , #go-dev,,\n")
        assert Settings().join_channels == ("#go-nuts", "#go-dev")

    @pytest.mark.parametrize("raw", ["1", "true", "YES", "on"])
    def test_flags(self, env_path: Path, raw: str) -> None:
        env_path.write_text(f"IRC_USE_TLS={raw}\nDEBUG={raw}\n")
        s = Settings()
        assert s.use_tls is True
        assert s.debug is True

    def test_sasl_enabled(self, env_path: Path) -> None:
        env_path.write_text("IRC_SASL_USER=bot\nIRC_SASL_PASSWORD=hunter2\n")
        assert Settings().sasl_enabled is True

    def test_goimports_formatter(self, env_path: Path) -> None:
        env_path.write_text("FORMATTER=GoImports\nGOIMPORTS_PATH=/opt/go/bin/goimports\n")
        s = Settings()
        assert s.formatter is Formatter.goimports
        assert s.goimports_path == "/opt/go/bin/goimports"

    def test_playground_url_trailing_slash(self, env_path: Path) -> None:
        env_path.write_text("PLAYGROUND_URL=https://go.dev/play/\n")
        assert Settings().playground_url == "https://go.dev/play"


class TestServerAddress:
    @pytest.mark.parametrize(
        ("server", "tls", "expected"),
        [
            ("irc.libera.chat", "true", ("irc.libera.chat", 6697)),
            ("irc.libera.chat", "false", ("irc.libera.chat", 6667)),
            ("irc.libera.chat:7000", "true", ("irc.libera.chat", 7000)),
            ("127.0.0.1:6667", "false", ("127.0.0.1", 6667)),
        ],
    )
    def test_ports(self, env_path: Path, server: str, tls: str, expected: tuple[str, int]) -> None:
        env_path.write_text(f"IRC_SERVER={server}\nIRC_USE_TLS={tls}\n")
        assert Settings().server_address == expected

    @pytest.mark.parametrize("server", ["", ":6667", "host:abc", "host:0", "host:70000"])
    def test_invalid(self, env_path: Path, server: str) -> None:
        env_path.write_text(f"IRC_SERVER={server}\n")
        with pytest.raises(ConfigError):
            Settings().server_address


class TestValidate:
    def test_minimal_valid(self, env_path: Path) -> None:
        env_path.write_text("IRC_SERVER=irc.libera.chat\n")
        Settings().validate()

    @pytest.mark.parametrize(
        ("content", "match"),
        [
            ("", "IRC_SERVER"),
            ("IRC_SERVER=h\nIRC_SASL_USER=bot\n", "together"),
            ("IRC_SERVER=h\nIRC_NICK=go play\n", "IRC_NICK"),
            ("IRC_SERVER=h\nPLAYGROUND_TIMEOUT=soon\n", "number"),
            ("IRC_SERVER=h\nPLAYGROUND_TIMEOUT=-1\n", "positive"),
            ("IRC_SERVER=h\nFORMATTER=gofmt\n", "FORMATTER"),
        ],
    )
    def test_rejects(self, env_path: Path, content: str, match: str) -> None:
        env_path.write_text(content)
        with pytest.raises(ConfigError, match=match):
            Settings().validate()

    def test_prefix_with_whitespace(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IRC_SERVER", "h")
        s = Settings()
        s.command_prefix = "! "
        with pytest.raises(ConfigError, match="COMMAND_PREFIX"):
            s.validate()


class TestDescribe:
    def test_masks_password(self, env_path: Path) -> None:
        env_path.write_text("IRC_SASL_USER=bot\nIRC_SASL_PASSWORD=hunter2\n")
        described = Settings().describe()
        assert described["IRC_SASL_PASSWORD"] == "***"
        assert described["IRC_SASL_USER"] == "bot"
        assert "hunter2" not in str(described)

    def test_empty_password_not_masked(self) -> None:
        assert Settings().describe()["IRC_SASL_PASSWORD"] == ""


class TestEnvFile:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert EnvFile(tmp_path / "absent.env").read_all() == {}

    def test_parsing(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text(
            "# comment\n"
            "\n"
            "PLAIN=value\n"
            'DOUBLE="quoted value"\n'
            "SINGLE='single'\n"
            "export EXPORTED=yes\n"
            "not a pair\n"
            "URL=https://example.org/?a=b\n"
        )
        assert EnvFile(path).read_all() == {
            "PLAIN": "value",
            "DOUBLE": "quoted value",
            "SINGLE": "single",
            "EXPORTED": "yes",
            "URL": "https://example.org/?a=b",
        }

    def test_read_single_key(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("A=1\n")
        env = EnvFile(path)
        assert env.read("A") == "1"
        assert env.read("B") == ""
