import pytest

from utils.tokens import SessionTokenIssuer


def test_issue_and_decode_claims():
    issuer = SessionTokenIssuer("secreto")

    payload = issuer.decode(issuer.issue({"id": 7, "nombre": "Ana"}))

    assert payload["id"] == 7
    assert payload["nombre"] == "Ana"
    assert "exp" in payload


def test_decode_rejects_token_signed_with_other_secret():
    token = SessionTokenIssuer("otro-secreto").issue({"id": 7, "nombre": "Ana"})

    assert SessionTokenIssuer("secreto").decode(token) is None


def test_decode_rejects_tampered_token():
    issuer = SessionTokenIssuer("secreto")
    header, payload, signature = issuer.issue({"id": 7, "nombre": "Ana"}).split(".")

    assert issuer.decode(f"{header}.{payload}.{signature[::-1]}") is None


def test_decode_rejects_expired_token():
    issuer = SessionTokenIssuer("secreto", expire_minutes=-1)

    assert issuer.decode(issuer.issue({"id": 7, "nombre": "Ana"})) is None


def test_decode_empty_token():
    assert SessionTokenIssuer("secreto").decode(None) is None
    assert SessionTokenIssuer("secreto").decode("") is None


def test_issuer_requires_secret():
    with pytest.raises(ValueError):
        SessionTokenIssuer("")
