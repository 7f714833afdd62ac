"""
Tests for the cmdshell configuration system.

Run with:  python -m pytest cmdshell/test_config_manager.py -v
"""

import io
import logging

import pytest
import yaml

from cmdshell.config_manager import (
    CmdShellConfig,
    ConfigurationError,
    ConfigurationManager,
    ConsoleConfig,
    ShellSettings,
    configure_logging,
    create_argument_parser,
    setup_configuration,
)
from cmdshell.demo import main


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


# ============================================================
# Dataclass sections
# ============================================================

class TestConfigSections:
    """Tests for to_dict / from_dict on each section."""

    def test_defaults(self):
        config = CmdShellConfig()
        assert config.shell.prompt == "cmdshell> "
        assert config.shell.unique_names is False
        assert config.console.log_level is None

    def test_partial_shell_section_keeps_defaults(self):
        config = CmdShellConfig.from_dict({"shell": {"prompt": "app> "}})
        assert config.shell.prompt == "app> "
        assert config.shell.stop_on_error is False
        assert config.console == ConsoleConfig()

    def test_empty_section(self):
        config = CmdShellConfig.from_dict({"shell": None})
        assert config.shell == ShellSettings()

    def test_to_dict_sections(self):
        data = CmdShellConfig().to_dict()
        assert set(data) == {"config_version", "description", "shell", "console"}
        assert data["shell"]["prompt"] == "cmdshell> "


# ============================================================
# ConfigurationManager
# ============================================================

class TestConfigurationManager:
    """Tests for loading, merging, validating and saving."""

    def test_load_explicit_file(self, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {
            "shell": {"prompt": "> ", "unique_names": True},
            "console": {"quiet": True},
        })
        manager = ConfigurationManager()
        config = manager.load_config(str(path))
        assert config.shell.prompt == "> "
        assert config.shell.unique_names is True
        assert config.console.quiet is True
        assert manager.config_file_path == path

    def test_missing_file_gives_defaults(self, tmp_path):
        manager = ConfigurationManager(str(tmp_path / "absent.yaml"))
        assert manager.load_config() == CmdShellConfig()

    def test_auto_discovery(self, tmp_path):
        path = write_yaml(tmp_path / "cmdshell.yaml", {"shell": {"prompt": "found> "}})
        manager = ConfigurationManager()
        manager.config_search_paths = [tmp_path / "nope.yaml", path]
        assert manager.load_config().shell.prompt == "found> "

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("shell: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigurationManager().load_config(str(path))

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigurationManager().load_config(str(path))

    def test_unknown_key_warns(self, tmp_path, caplog):
        path = write_yaml(tmp_path / "c.yaml", {
            "network": {},
            "shell": {"promt": "typo> "},
            "console": {"colour": True},
        })
        with caplog.at_level(logging.WARNING):
            config = ConfigurationManager().load_config(str(path))
        assert "Unknown config key 'network'" in caplog.text
        assert "Unknown config key 'shell.promt'" in caplog.text
        assert "Unknown config key 'console.colour'" in caplog.text
        assert config.shell.prompt == "cmdshell> "

    @pytest.mark.parametrize("section", ["shell", "console"])
    def test_non_mapping_section_raises(self, tmp_path, section):
        path = write_yaml(tmp_path / "c.yaml", {section: "hello"})
        with pytest.raises(ConfigurationError, match=f"Section '{section}'"):
            ConfigurationManager().load_config(str(path))

    def test_cli_overrides_file(self, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"shell": {"prompt": "file> "}})
        args = create_argument_parser().parse_args(
            ["-c", str(path), "-p", "cli> ", "--stop-on-error", "--log-level", "debug"])
        manager = ConfigurationManager(args.config)
        manager.load_config()
        config = manager.merge_cli_args(args)
        assert config.shell.prompt == "cli> "
        assert config.shell.stop_on_error is True
        assert config.console.log_level == "DEBUG"

    def test_validate_ok(self):
        manager = ConfigurationManager()
        manager.config = CmdShellConfig()
        assert manager.validate_config() == (True, [])

    def test_validate_errors(self):
        manager = ConfigurationManager()
        manager.config = CmdShellConfig(
            shell=ShellSettings(prompt=42),
            console=ConsoleConfig(verbose=True, quiet=True, log_level="LOUD"),
        )
        is_valid, errors = manager.validate_config()
        assert not is_valid
        assert len(errors) == 3

    def test_save_and_reload(self, tmp_path):
        manager = ConfigurationManager()
        manager.config = CmdShellConfig(shell=ShellSettings(prompt="saved> ", unique_names=True))
        target = tmp_path / "sub" / "saved.yaml"
        assert manager.save_config(str(target))

        reloaded = ConfigurationManager().load_config(str(target))
        assert reloaded == manager.config

    def test_sample_config_loads(self, tmp_path):
        target = tmp_path / "sample.yaml"
        assert ConfigurationManager().create_sample_config(str(target))
        assert ConfigurationManager().load_config(str(target)) == CmdShellConfig()

    def test_get_config_is_a_copy(self):
        manager = ConfigurationManager()
        manager.config = CmdShellConfig()
        copy = manager.get_config()
        copy.shell.prompt = "changed> "
        assert manager.config.shell.prompt == "cmdshell> "


# ============================================================
# Logging and CLI setup
# ============================================================

class TestSetup:
    """Tests for logging levels and setup_configuration."""

    @pytest.mark.parametrize("console, level", [
        (ConsoleConfig(), logging.INFO),
        (ConsoleConfig(verbose=True), logging.DEBUG),
        (ConsoleConfig(quiet=True), logging.WARNING),
        (ConsoleConfig(verbose=True, log_level="error"), logging.ERROR),
    ])
    def test_configure_logging_level(self, console, level):
        assert configure_logging(console) == level

    def test_setup_configuration(self, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"shell": {"prompt": "x> "}})
        config, should_exit, manager = setup_configuration(["-c", str(path), "-v"])
        assert not should_exit
        assert config.shell.prompt == "x> "
        assert config.console.verbose is True
        assert manager.config is config

    def test_setup_configuration_invalid(self, tmp_path):
        config, should_exit, _ = setup_configuration(
            ["-c", str(tmp_path / "absent.yaml"), "-v", "-q"])
        assert should_exit
        assert config is not None

    def test_create_config_exits(self, tmp_path):
        target = tmp_path / "sample.yaml"
        config, should_exit, manager = setup_configuration(["--create-config", str(target)])
        assert (config, should_exit, manager) == (None, True, None)
        assert target.exists()

    def test_main_runs_session(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("echo hi\nquit\n"))
        status = main(["-c", str(tmp_path / "absent.yaml"), "-p", "t> "])
        assert status == 0
        out = capsys.readouterr().out
        assert "t> hi" in out

    def test_main_invalid_config(self, tmp_path):
        assert main(["-c", str(tmp_path / "absent.yaml"), "-v", "-q"]) == 2

    def test_main_malformed_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("shell: [unclosed\n")
        assert main(["-c", str(path)]) == 2
        assert "Error loading config file" in capsys.readouterr().err

    def test_main_section_not_mapping(self, tmp_path, capsys):
        path = tmp_path / "s.yaml"
        path.write_text("shell: hello\n")
        assert main(["-c", str(path)]) == 2
        assert "must contain a mapping" in capsys.readouterr().err
