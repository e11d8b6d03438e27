from gamermatch.config import Settings, get_settings, settings


def test_get_settings_returns_module_instance():
    assert get_settings() is settings


def test_defaults():
    config = Settings(_env_file=None, ADMIN_IDS=None, ENVIRONMENT="production")
    assert config.PLATFORM_WEIGHT == 2
    assert config.GENRE_WEIGHT == 1
    assert config.PLAYSTYLE_WEIGHT == 3
    assert config.VOICE_CHAT_WEIGHT == 2
    assert config.DISCOVERY_PAGE_SIZE == 20
    assert config.ACCOUNT_DELETION_GRACE_DAYS == 30
    assert config.get_admin_ids() == []


def test_admin_ids_are_split_and_trimmed():
    config = Settings(_env_file=None, ADMIN_IDS=" admin_1, admin_2 ,,")
    assert config.get_admin_ids() == ["admin_1", "admin_2"]


def test_debug_parsed_from_string():
    assert Settings(_env_file=None, DEBUG="yes").DEBUG is True
    assert Settings(_env_file=None, DEBUG="false").DEBUG is False


def test_test_environment_admins_loaded():
    assert settings.get_admin_ids() == ["admin_1", "admin_2"]


def test_debug_follows_environment_when_unset():
    assert Settings(_env_file=None, ENVIRONMENT="development").DEBUG is True
    assert Settings(_env_file=None, ENVIRONMENT="production").DEBUG is False
    assert Settings(_env_file=None, ENVIRONMENT="development", DEBUG=False).DEBUG is False
