import uuid
from datetime import timedelta

from jose import jwt

from trafficsync.web.auth import create_access_token, decode_token
from trafficsync.web.config import config


def test_round_trip_identity():
    user_id = uuid.uuid4()

    data = decode_token(create_access_token(user_id, "ops@traffic.com", "operator"))

    assert data.user_id == user_id
    assert data.email == "ops@traffic.com"
    assert data.role == "operator"


def test_expired_token():
    token = create_access_token(uuid.uuid4(), "a@traffic.com", "admin", timedelta(seconds=-5))
    assert decode_token(token) is None


def test_unknown_role_is_rejected():
    token = create_access_token(uuid.uuid4(), "a@traffic.com", "superuser")
    assert decode_token(token) is None


def test_missing_claims_and_foreign_signature():
    missing_email = jwt.encode(
        {"sub": str(uuid.uuid4()), "role": "admin", "exp": 4102444800},
        config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
    )
    forged = create_access_token(uuid.uuid4(), "a@traffic.com", "admin").rsplit(".", 1)[0] + ".sig"

    assert decode_token(missing_email) is None
    assert decode_token(forged) is None
    assert decode_token("not-a-token") is None
