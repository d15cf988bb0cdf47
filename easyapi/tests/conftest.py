from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from easyapi.app import create_app
from easyapi.shared.config import AppConfig

from .fakes import build_config


@pytest.fixture()
def app_config() -> AppConfig:
    return build_config()


@pytest.fixture()
def app(app_config: AppConfig) -> Flask:
    return create_app(app_config)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
