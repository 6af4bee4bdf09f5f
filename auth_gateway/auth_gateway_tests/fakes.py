"""
Test doubles for the GraphQL data service.
"""
import json

import httpx

from auth_gateway.auth_gateway.auth_service.config import Settings

ADMIN_SECRET = "test-admin-secret"
JWT_SECRET = "test-signing-secret-0123456789abcdef"
DATA_SERVICE_URL = "https://data.example.test/v1/graphql"


class FakeDataService:
    """Answers the three user operations the gateway issues, Hasura style."""

    def __init__(self):
        self.users = {}
        self.requests = []
        self.next_id = 1
        self.unreachable = False
        self.fail_updates = False
        self.lookup_override = None

    def add_user(self, username, email, password):
        user = {"id": self.next_id, "username": username, "email": email, "password": password}
        self.users[email] = user
        self.next_id += 1
        return user

    def operations(self):
        return [req["body"]["query"] for req in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        body = json.loads(request.content)
        self.requests.append({"headers": dict(request.headers), "body": body})
        query = body["query"]
        variables = body["variables"]

        if "insert_users_one" in query:
            if variables["email"] in self.users:
                return httpx.Response(200, json={"errors": [{
                    "message": 'Uniqueness violation. duplicate key value violates unique constraint "users_email_key"',
                    "extensions": {"code": "constraint-violation"},
                }]})
            user = self.add_user(variables["username"], variables["email"], variables["password"])
            return httpx.Response(200, json={"data": {"insert_users_one": dict(user)}})

        if "update_users_by_pk" in query:
            if self.fail_updates:
                return httpx.Response(200, json={"errors": [{"message": "update failed"}]})
            for user in self.users.values():
                if user["id"] == variables["id"]:
                    user["password"] = variables["password"]
                    return httpx.Response(200, json={"data": {"update_users_by_pk": {"password": user["password"]}}})
            return httpx.Response(200, json={"data": {"update_users_by_pk": None}})

        if self.lookup_override is not None:
            return httpx.Response(200, json=self.lookup_override)
        user = self.users.get(variables["email"])
        return httpx.Response(200, json={"data": {"users": [dict(user)] if user else []}})


def make_settings(**overrides):
    values = {
        "DATA_SERVICE_URL": DATA_SERVICE_URL,
        "DATA_SERVICE_ADMIN_SECRET": ADMIN_SECRET,
        "JWT_SECRET": JWT_SECRET,
        "BCRYPT_ROUNDS": 4,
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(**values)
