"""
Tests for the fixed GraphQL user operations and envelope decoding.
"""
import httpx
import pytest

from auth_gateway.auth_gateway.auth_service.exceptions import (
    InvalidUserData,
    PasswordUpdateFailed,
    UserCreationFailed,
)
from auth_gateway.auth_gateway.auth_service.schemas import UsersEnvelope
from auth_gateway.auth_gateway.auth_service.users import (
    create_user,
    decode_envelope,
    find_user_by_email,
    update_password,
)


def test_find_user_by_email_returns_record(data_service, fake_data_service):
    fake_data_service.add_user("alice", "a@x.com", "$2b$04$digest")
    user = find_user_by_email(data_service, "a@x.com")
    assert user.id == 1
    assert user.email == "a@x.com"
    assert user.password == "$2b$04$digest"

    sent = fake_data_service.requests[0]["body"]
    assert sent["variables"] == {"email": "a@x.com"}
    assert "a@x.com" not in sent["query"]


def test_find_user_by_email_missing_user(data_service):
    assert find_user_by_email(data_service, "nobody@x.com") is None


def test_create_user_returns_assigned_id(data_service, fake_data_service):
    fake_data_service.next_id = 17
    user = create_user(data_service, "alice", "a@x.com", "$2b$04$digest")
    assert user.id == 17
    assert user.username == "alice"


def test_create_user_graphql_error(data_service, fake_data_service):
    fake_data_service.add_user("alice", "a@x.com", "$2b$04$digest")
    with pytest.raises(UserCreationFailed) as excinfo:
        create_user(data_service, "alice", "a@x.com", "$2b$04$other")
    assert "Uniqueness violation" in excinfo.value.context["graphql_errors"][0]


def test_update_password(data_service, fake_data_service):
    fake_data_service.add_user("alice", "a@x.com", "$2b$04$old")
    update_password(data_service, 1, "$2b$05$new")
    assert fake_data_service.users["a@x.com"]["password"] == "$2b$05$new"
    assert fake_data_service.requests[0]["body"]["variables"] == {"id": 1, "password": "$2b$05$new"}


def test_update_password_unknown_id(data_service):
    with pytest.raises(PasswordUpdateFailed):
        update_password(data_service, 99, "$2b$05$new")


@pytest.mark.parametrize(
    "raw, field",
    [
        (b"<html>bad gateway</html>", "<body>"),
        (b'{"data": {}}', "data.users"),
        (b'{"data": {"users": [{"id": 1, "email": "a@x.com"}]}}', "data.users.0.password"),
        (b'{"data": {"users": [{"id": 1, "email": "a@x.com", "password": 5}]}}', "data.users.0.password"),
    ],
)
def test_decode_envelope_names_invalid_field(raw, field):
    with pytest.raises(InvalidUserData) as excinfo:
        decode_envelope(raw, UsersEnvelope, InvalidUserData, "UserByEmail")
    assert field in excinfo.value.context["fields"]


def test_decode_envelope_surfaces_graphql_errors():
    raw = b'{"errors": [{"message": "field \\"users\\" not found in type: \'query_root\'"}]}'
    with pytest.raises(InvalidUserData) as excinfo:
        decode_envelope(raw, UsersEnvelope, InvalidUserData, "UserByEmail")
    assert excinfo.value.context["operation"] == "UserByEmail"
    assert len(excinfo.value.context["graphql_errors"]) == 1


def test_transport_failure_propagates(settings):
    from auth_gateway.auth_gateway.auth_service.data_service import DataServiceClient
    from auth_gateway.auth_gateway.auth_service.exceptions import TransportError

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = DataServiceClient.from_settings(settings, transport=httpx.MockTransport(handler))
    with pytest.raises(TransportError):
        find_user_by_email(client, "a@x.com")


def test_decode_envelope_accepts_null_errors():
    raw = b'{"data": {"users": []}, "errors": null}'
    envelope = decode_envelope(raw, UsersEnvelope, InvalidUserData, "UserByEmail")
    assert envelope.data.users == []
