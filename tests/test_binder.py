import pytest

from propconf import (
    ConfigBinder,
    ConfigProp,
    ConstructionError,
    DocumentError,
    PropertyDescriptor,
    Schema,
    ValidationError,
    bind,
    is_valid,
    serialize,
    serialize_defaults,
)
from propconf.registry import registry

from conftest import Credentials, Flags, Role, Server, Service


def test_bind_good_document():
    """Should correctly parse a good JSON object."""
    document = {"username": "testUser", "password": "testPassword"}
    creds = bind(Credentials, document)

    assert isinstance(creds, Credentials)
    assert creds.username == "testUser"
    assert creds.password == "testPassword"
    assert creds.is_admin is False


def test_bind_missing_required_field():
    with pytest.raises(ValidationError) as excinfo:
        bind(Credentials, {"username": "testUser"})
    assert excinfo.value.missing == ["password"]
    assert excinfo.value.owner == "Credentials"


def test_bind_reports_every_missing_field():
    with pytest.raises(ValidationError) as excinfo:
        bind(Credentials, {"isAdmin": True})
    assert set(excinfo.value.missing) == {"username", "password"}
    assert excinfo.value.missing == ["username", "password"]


def test_validation_error_message():
    with pytest.raises(ValidationError) as excinfo:
        bind(Server, {"credentials": {"username": "u", "password": "p"}})
    message = str(excinfo.value)
    assert "Missing properties in source data: port" in message
    assert "| loc: Server.port" in message
    assert "| expects: int" in message
    assert "| description: Port to listen on." in message


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        bind(Credentials, {})


def test_bind_uses_serialized_name():
    creds = bind(
        Credentials,
        {"username": "u", "password": "p", "isAdmin": True, "is_admin": False},
    )
    assert creds.is_admin is True


def test_bind_ignores_unknown_keys():
    creds = bind(Credentials, {"username": "u", "password": "p", "extra": 1})
    assert not hasattr(creds, "extra")


def test_bind_keeps_falsy_values():
    flags = bind(Flags, {"enabled": False, "retries": 0, "label": ""})
    assert flags.enabled is False
    assert flags.retries == 0
    assert flags.label == ""


def test_bind_legacy_falsy_defaults():
    flags = bind(
        Flags,
        {"enabled": False, "retries": 0, "label": ""},
        legacy_falsy_defaults=True,
    )
    assert flags.enabled is True
    assert flags.retries == 3
    assert flags.label == "unnamed"

    flags = bind(Flags, {"retries": 5, "label": "x"}, legacy_falsy_defaults=True)
    assert flags.retries == 5
    assert flags.label == "x"


def test_bind_legacy_falsy_required_field_without_default():
    creds = bind(
        Credentials, {"username": "", "password": "p"}, legacy_falsy_defaults=True
    )
    assert not hasattr(creds, "username")
    assert not is_valid(creds)


def test_bind_constructor_arguments():
    with pytest.raises(ConstructionError, match="Could not construct Service"):
        bind(Service, {"token": "abc"})

    service = bind(Service, {"token": "abc"}, ["svc"], {"debug": True})
    assert service.name == "svc"
    assert service.debug is True
    assert service.token == "abc"


def test_construction_error_is_type_error():
    with pytest.raises(TypeError) as excinfo:
        bind(Service, {"token": "abc"})
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_bind_rejects_non_mapping():
    with pytest.raises(DocumentError):
        bind(Credentials, ["username", "password"])  # type: ignore[arg-type]


def test_bind_returns_independent_instances():
    document = {"port": 1, "credentials": {"username": "u", "password": "p"}}
    first = bind(Server, document)
    second = bind(Server, document)
    assert first is not second
    assert first.roles is not second.roles
    first.roles.append(Role.ADMIN)
    assert second.roles == [Role.USER]


def test_bind_nested_config(server_document):
    server = bind(Server, server_document)
    assert isinstance(server.credentials, Credentials)
    assert server.credentials.username == "root"
    assert server.credentials.is_admin is True
    assert server.roles == [Role.ADMIN, Role.USER]
    assert server.tags == {"env": "prod"}
    assert server.timeout == 1.5


def test_bind_nested_missing_field(server_document):
    del server_document["credentials"]["password"]
    with pytest.raises(ValidationError) as excinfo:
        bind(Server, server_document)
    assert excinfo.value.missing == ["password"]
    assert excinfo.value.owner == "Credentials"


def test_bind_invalid_enum_value(server_document):
    server_document["roles"] = ["root"]
    with pytest.raises(ValueError):
        bind(Server, server_document)


def test_round_trip():
    document = {"username": "testUser", "password": "testPassword", "isAdmin": True}
    assert serialize(bind(Credentials, document)) == document


def test_round_trip_nested(server_document):
    assert serialize(bind(Server, server_document)) == server_document


def test_serialize_keeps_schema_order():
    creds = Credentials()
    creds.is_admin = True
    creds.password = "p"
    creds.username = "u"
    assert list(serialize(creds)) == ["username", "password", "isAdmin"]


def test_serialize_does_not_validate():
    creds = Credentials()
    creds.username = "u"
    assert serialize(creds) == {"username": "u", "isAdmin": False}


def test_serialize_defaults():
    assert serialize_defaults(registry.lookup(Credentials)) == {
        "username": "REQUIRED FIELD (str)",
        "password": "REQUIRED FIELD (str)",
        "isAdmin": False,
    }


def test_serialize_defaults_placeholders():
    defaults = serialize_defaults(registry.lookup(Server))
    assert defaults == {
        "host": "localhost",
        "port": "PORT NUMBER",
        "credentials": "REQUIRED FIELD (Credentials)",
        "roles": ["user"],
        "tags": {},
    }
    assert "timeout" not in defaults


def test_serialize_defaults_names_declared_type():
    schema = Schema.build(
        PropertyDescriptor("items", required=True, declared_type=list[int])
    )
    assert "list[int]" in serialize_defaults(schema)["items"]


def test_is_valid():
    creds = bind(Credentials, {"username": "u", "password": "p"})
    assert is_valid(creds)

    creds = Credentials()
    assert not is_valid(creds)
    creds.username = "u"
    assert not is_valid(creds)
    creds.password = "p"
    assert is_valid(creds)


def test_is_valid_optional_field_without_default():
    document = {"port": 1, "credentials": {"username": "u", "password": "p"}}
    server = bind(Server, document)
    assert not is_valid(server)
    server.timeout = None
    assert is_valid(server)


def test_undecorated_class_has_no_fields():
    class Plain:
        pass

    plain = bind(Plain, {"anything": 1})
    assert isinstance(plain, Plain)
    assert serialize(plain) == {}
    assert is_valid(plain)


def test_explicit_schema():
    class Plain:
        pass

    schema = Schema.build(
        PropertyDescriptor("user_name", "userName", required=True, declared_type=str),
        PropertyDescriptor("level", default=1, declared_type=int),
    )
    binder = ConfigBinder(Plain, schema)
    plain = binder.from_dict({"userName": "u"})
    assert plain.user_name == "u"
    assert plain.level == 1
    assert binder.to_dict(plain) == {"userName": "u", "level": 1}
    assert binder.is_valid(plain)
    assert binder.default_dict() == {"userName": "REQUIRED FIELD (str)", "level": 1}

    with pytest.raises(ValidationError):
        binder.from_dict({})


def test_binder_from_dict(credentials_binder):
    creds = credentials_binder.from_dict({"username": "u", "password": "p"})
    assert creds.username == "u"
    assert credentials_binder.schema == registry.lookup(Credentials)


def test_binder_constructor_arguments():
    binder = ConfigBinder(Service)
    service = binder.from_dict({"token": "t"}, "svc", debug=True)
    assert service.name == "svc"
    assert service.debug is True


def test_binder_legacy_falsy_defaults():
    binder = ConfigBinder(Flags, legacy_falsy_defaults=True)
    assert binder.from_dict({"retries": 0}).retries == 3
    assert ConfigBinder(Flags).from_dict({"retries": 0}).retries == 0


def test_subclass_inherits_fields():
    class AdminCredentials(Credentials):
        is_admin: bool = ConfigProp(default=True, name="isAdmin")
        level: int = ConfigProp(default=9)

    binder = ConfigBinder(AdminCredentials)
    assert binder.schema.names() == ("username", "password", "isAdmin", "level")
    admin = binder.from_dict({"username": "u", "password": "p"})
    assert admin.is_admin is True
    assert admin.level == 9
