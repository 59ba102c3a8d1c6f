from __future__ import annotations

from typer.testing import CliRunner

from ecomail_cli import config, main


def _use_tmp_config_dir(tmp_path, monkeypatch) -> None:
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)


def test_settings_group_available() -> None:
    app = main._build_app()
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "settings" in result.output
    assert "call" in result.output


def test_settings_init_writes_config(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    runner = CliRunner()

    result = runner.invoke(main.app, ["settings", "init", "--api-key", "secret-key-1234"])

    assert result.exit_code == 0
    assert config.load_config().api_key == "secret-key-1234"


def test_settings_init_keeps_existing_without_force(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    config.save_config(config.AppConfig(api_key="old"))
    runner = CliRunner()

    result = runner.invoke(main.app, ["settings", "init", "--api-key", "new"])

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert config.load_config().api_key == "old"


def test_settings_set_updates_query_and_format(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    config.save_config(config.AppConfig(api_key="k", query={"page": 1}))
    runner = CliRunner()

    result = runner.invoke(
        main.app,
        ["settings", "set", "--format", "jsono", "--query", "per_page=20", "--unset-query", "page"],
    )

    assert result.exit_code == 0
    cfg = config.load_config()
    assert cfg.response_format == "jsono"
    assert cfg.query == {"per_page": "20"}


def test_settings_set_rejects_unknown_format(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    runner = CliRunner()

    result = runner.invoke(main.app, ["settings", "set", "--format", "xml"])

    assert result.exit_code == 2


def test_settings_show_masks_api_key(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    config.save_config(config.AppConfig(api_key="abcdefghijklmnop"))
    runner = CliRunner()

    result = runner.invoke(main.app, ["settings", "show"])

    assert result.exit_code == 0
    assert "abcdefghijklmnop" not in result.output
    assert "abcd" in result.output


def test_settings_get_unknown_key(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(tmp_path, monkeypatch)
    runner = CliRunner()

    result = runner.invoke(main.app, ["settings", "get", "api_key"])

    assert result.exit_code == 2
