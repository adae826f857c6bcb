import pytest

from api import create_app, shutdown_app
from api.config import (
    DEFAULT_JWT_REFRESH_SECRET,
    DEFAULT_JWT_SECRET,
    ProductionConfig,
    TestingConfig,
    check_production_secrets,
    get_config,
)


@pytest.mark.parametrize(
    "name, expected",
    [("prod", ProductionConfig), ("production", ProductionConfig), ("test", TestingConfig), ("testing", TestingConfig)],
)
def test_get_config_selects_environment(name, expected):
    assert get_config(name) is expected


def test_production_refuses_default_secrets(tmp_path):
    overrides = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'prod.db'}",
        "JWT_SECRET": DEFAULT_JWT_SECRET,
        "JWT_REFRESH_SECRET": DEFAULT_JWT_REFRESH_SECRET,
    }
    with pytest.raises(RuntimeError):
        create_app("prod", overrides=overrides)


def test_production_refuses_one_default_secret():
    with pytest.raises(RuntimeError):
        check_production_secrets(
            {"APP_ENV": "prod", "JWT_SECRET": "real-access-secret", "JWT_REFRESH_SECRET": DEFAULT_JWT_REFRESH_SECRET}
        )


def test_production_boots_with_configured_secrets(tmp_path):
    app = create_app(
        "prod",
        overrides={
            "DATABASE_URL": f"sqlite:///{tmp_path / 'prod.db'}",
            "JWT_SECRET": "real-access-secret",
            "JWT_REFRESH_SECRET": "real-refresh-secret",
        },
    )
    try:
        assert app.config["APP_ENV"] == "prod"
        assert app.test_client().get("/api/v1/health").status_code == 200
    finally:
        shutdown_app(app)


def test_default_secrets_are_allowed_outside_production():
    check_production_secrets(
        {"APP_ENV": "dev", "JWT_SECRET": DEFAULT_JWT_SECRET, "JWT_REFRESH_SECRET": DEFAULT_JWT_REFRESH_SECRET}
    )
