from shared import auth
from shared.auth import get_password_hash, verify_password
from shared.config import Settings, get_settings


def test_bcrypt_rounds_come_from_settings(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "5")
    assert Settings().bcrypt_rounds == 5

    monkeypatch.delenv("BCRYPT_ROUNDS")
    assert Settings().bcrypt_rounds == 12


def test_hashing_uses_the_configured_rounds():
    rounds = get_settings().bcrypt_rounds
    assert auth.BCRYPT_ROUNDS == rounds

    hashed = get_password_hash("secret123")

    assert hashed.startswith(f"$2b${rounds:02d}$")
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_settings_defaults(monkeypatch):
    for name in ("ENVIRONMENT", "SESSION_MAX_AGE", "CORS_ORIGINS", "SEED_DEFAULTS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.environment == "development"
    assert settings.is_production is False
    assert settings.session_max_age == 24 * 60 * 60
    assert settings.cors_origins == ["*"]
    assert settings.seed_defaults is True
