"""
Tests for the auth gateway service.

Covers:

- Signup/login flows through the FastAPI app (`test_auth.py`)
- Password hashing and rehash detection (`test_password_hasher.py`)
- Session token claims (`test_token_issuer.py`)
- GraphQL data service client and user operations (`test_data_service.py`, `test_users.py`)
- Settings and auth event logging (`test_config.py`, `test_event_logger.py`)

The data service is always replaced by `fakes.FakeDataService`; no network is used.
"""
