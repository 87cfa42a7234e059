from enum import Enum

import pytest

from propconf import ConfigBinder, ConfigProp


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Credentials:
    username: str = ConfigProp(required=True)
    password: str = ConfigProp(required=True)
    is_admin: bool = ConfigProp(default=False, name="isAdmin")
    """Grants access to the admin pages."""

    def __init__(self, b: bool = False):
        self.b = b


class Server:
    host: str = ConfigProp(default="localhost")
    port: int = ConfigProp(required=True, placeholder_text="PORT NUMBER")
    """Port to listen on."""
    credentials: Credentials = ConfigProp(required=True)
    roles: list[Role] = ConfigProp(default=[Role.USER])
    tags: dict[str, str] = ConfigProp(default={})
    timeout: float | None = ConfigProp()


class Flags:
    enabled: bool = ConfigProp(default=True)
    retries: int = ConfigProp(default=3)
    label: str = ConfigProp(default="unnamed")


class Service:
    token: str = ConfigProp(required=True)

    def __init__(self, name: str, debug: bool = False):
        self.name = name
        self.debug = debug


@pytest.fixture
def credentials_binder():
    return ConfigBinder(Credentials)


@pytest.fixture
def server_binder():
    return ConfigBinder(Server)


@pytest.fixture
def server_document():
    return {
        "host": "example.org",
        "port": 8080,
        "credentials": {"username": "root", "password": "hunter2", "isAdmin": True},
        "roles": ["admin", "user"],
        "tags": {"env": "prod"},
        "timeout": 1.5,
    }
