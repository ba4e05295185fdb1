import yaml
from dockdesk.config import ConfigManager


class TestConfigManager:
    def test_creates_default_file(self, tmp_path):
        cm = ConfigManager(config_dir=tmp_path / "dockdesk")

        assert cm.config_file.exists()
        with open(cm.config_file) as f:
            data = yaml.safe_load(f)
        assert data['daemon']['host'] is None
        assert data['daemon']['initial_refresh'] is True
        assert data['logging']['level'] == "INFO"

    def test_user_values_override_defaults(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "daemon:\n  host: tcp://127.0.0.1:2375\n  initial_refresh: false\n"
            "logging:\n  level: debug\n"
        )

        cm = ConfigManager(config_dir=tmp_path)

        assert cm.get_daemon_host() == "tcp://127.0.0.1:2375"
        assert cm.should_refresh_on_start() is False
        assert cm.get_log_level() == "DEBUG"
        # Untouched keys keep their defaults
        assert cm.get_config().logging.backup_count == 5

    def test_unknown_keys_ignored(self, tmp_path):
        (tmp_path / "config.yaml").write_text("daemon:\n  colour: blue\n")

        cm = ConfigManager(config_dir=tmp_path)

        assert not hasattr(cm.get_config().daemon, "colour")
        assert cm.get_daemon_host() is None

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "config.yaml").write_text("daemon: [unclosed\n")

        cm = ConfigManager(config_dir=tmp_path)

        assert cm.get_daemon_host() is None
        assert cm.should_refresh_on_start() is True

    def test_non_mapping_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")

        cm = ConfigManager(config_dir=tmp_path)

        assert cm.get_log_level() == "INFO"
