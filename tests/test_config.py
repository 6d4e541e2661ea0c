from pathlib import Path

import pytest
from setuptools import find_namespace_packages

from app.config import Settings

ROOT = Path(__file__).resolve().parent.parent


def test_settings_read_dotenv_file():
    assert Settings.model_config["env_file"] == ".env"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CURRENCY_SYMBOL", "€")
    monkeypatch.setenv("CREATE_TABLES", "true")

    settings = Settings()

    assert settings.CURRENCY_SYMBOL == "€"
    assert settings.CREATE_TABLES is True


def test_package_discovery_includes_app_modules():
    tomllib = pytest.importorskip("tomllib")
    with open(ROOT / "pyproject.toml", "rb") as f:
        find = tomllib.load(f)["tool"]["setuptools"]["packages"]["find"]

    assert find["namespaces"] is True
    packages = find_namespace_packages(where=str(ROOT), include=find["include"])
    assert {"app", "app.agents", "app.billing", "app.models", "app.schemas"} <= set(packages)
