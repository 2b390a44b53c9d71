from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from errors import InvalidTokenError
from security import PasswordHasher, TokenService


def test_password_hash_roundtrip():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash('secret1')
    assert hashed != 'secret1'
    assert hasher.verify('secret1', hashed)
    assert not hasher.verify('secret2', hashed)


def test_hashes_are_salted():
    hasher = PasswordHasher(rounds=4)
    assert hasher.hash('secret1') != hasher.hash('secret1')


def test_issue_and_verify():
    tokens = TokenService('s3cret')
    claims = tokens.verify(tokens.issue(42, 'a@x.com'))
    assert claims.user_id == 42
    assert claims.email == 'a@x.com'


def test_token_expires_after_seven_days():
    tokens = TokenService('s3cret')
    issued = datetime.now(timezone.utc) - timedelta(days=7, minutes=1)
    with pytest.raises(InvalidTokenError):
        tokens.verify(tokens.issue(1, 'a@x.com', now=issued))

    still_valid = datetime.now(timezone.utc) - timedelta(days=6, hours=23)
    assert tokens.verify(tokens.issue(1, 'a@x.com', now=still_valid)).user_id == 1


def test_wrong_secret_rejected():
    token = TokenService('one').issue(1, 'a@x.com')
    with pytest.raises(InvalidTokenError):
        TokenService('two').verify(token)


def test_tampered_token_rejected():
    token = TokenService('s3cret').issue(1, 'a@x.com')
    header, payload, signature = token.split('.')
    forged = jwt.encode({'userId': 2, 'email': 'a@x.com'}, 'other', algorithm='HS256').split('.')[1]
    with pytest.raises(InvalidTokenError):
        TokenService('s3cret').verify('.'.join([header, forged, signature]))


def test_garbage_and_missing_claims_rejected():
    tokens = TokenService('s3cret')
    with pytest.raises(InvalidTokenError):
        tokens.verify('not-a-token')
    no_user = jwt.encode({'email': 'a@x.com'}, 's3cret', algorithm='HS256')
    with pytest.raises(InvalidTokenError):
        tokens.verify(no_user)
