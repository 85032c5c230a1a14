import logging

import yaml
from cratedui.config import AppConfig, ConfigManager
from cratedui.main import setup_logging


def test_creates_default_file(tmp_path):
    manager = ConfigManager(config_dir=tmp_path)

    assert manager.config_file.exists()
    data = yaml.safe_load(manager.config_file.read_text())
    assert data['ui']['stats_refresh_interval'] == 5.0
    assert data['keybindings']['stats'] == "t"


def test_merges_user_values(tmp_path):
    (tmp_path / "config.yaml").write_text(yaml.dump({
        'keybindings': {'quit': 'Q'},
        'ui': {'stats_refresh_interval': 10, 'color_theme': {'active': 'bright_green'}},
        'docker': {'base_url': 'tcp://localhost:2375'},
    }))

    manager = ConfigManager(config_dir=tmp_path)
    config = manager.get_config()

    assert manager.get_key_binding('quit') == 'Q'
    assert manager.get_key_binding('filter') == '/'
    assert manager.get_stats_refresh_interval() == 10.0
    assert config.ui.color_theme.active == 'bright_green'
    assert config.ui.color_theme.muted == 'grey50'
    assert config.docker.base_url == 'tcp://localhost:2375'


def test_unknown_keys_are_ignored(tmp_path):
    (tmp_path / "config.yaml").write_text(yaml.dump({'bogus': 1, 'ui': {'nope': True}}))

    config = ConfigManager(config_dir=tmp_path).get_config()

    assert config == AppConfig()


def test_invalid_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text("- just\n- a list\n")

    assert ConfigManager(config_dir=tmp_path).get_config() == AppConfig()


def test_is_key_binding(tmp_path):
    manager = ConfigManager(config_dir=tmp_path)
    assert manager.is_key_binding('q', 'quit')
    assert not manager.is_key_binding('Q', 'quit')
    assert not manager.is_key_binding('q', 'missing_action')


def test_style_for_tint(tmp_path):
    theme = ConfigManager(config_dir=tmp_path).get_config().ui.color_theme
    assert theme.style_for('warning') == 'dark_orange'
    assert theme.style_for('unknown') == ''


def test_setup_logging_uses_configured_path(tmp_path):
    log_file = tmp_path / "app.log"
    (tmp_path / "config.yaml").write_text(yaml.dump({
        'logging': {'level': 'debug', 'file_path': str(log_file), 'backup_count': 2},
    }))
    manager = ConfigManager(config_dir=tmp_path)
    previous_level = logging.getLogger().level

    handler = setup_logging(manager)
    try:
        assert handler.baseFilename == str(log_file)
        assert handler.backupCount == 2
        assert handler.maxBytes == 10 * 1024 * 1024
        assert logging.getLogger().level == logging.DEBUG
    finally:
        logging.getLogger().removeHandler(handler)
        logging.getLogger().setLevel(previous_level)
        handler.close()
