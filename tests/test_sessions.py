import pytest

from todoapp.auth.accounts import TokenEntry
from todoapp.auth.tokens import AUTH_PURPOSE
from todoapp.errors import AccountNotFound, InvalidCredentials, Unauthenticated

MISSING_ID = "f" * 32


@pytest.fixture()
def account(accounts, hasher):
    return accounts.create("dan@test.com", hasher.hash("userOnePass"))


def test_login_then_authenticate(sessions, account):
    result = sessions.login("dan@test.com", "userOnePass")
    assert result.account_id == account.id
    assert result.token

    resolved = sessions.authenticate(result.token)
    assert resolved.id == account.id
    assert resolved.password_hash == ""
    assert resolved.tokens == ()


def test_login_appends_token_entry(sessions, accounts, account):
    result = sessions.login("dan@test.com", "userOnePass")
    stored = accounts.find_by_id(account.id)
    assert stored.tokens == (TokenEntry(purpose="auth", token=result.token),)


def test_unknown_email_is_invalid_credentials(sessions):
    with pytest.raises(InvalidCredentials):
        sessions.login("nobody@test.com", "whatever")


def test_wrong_password_revokes_every_token(sessions, accounts, account):
    first = sessions.login("dan@test.com", "userOnePass").token
    second = sessions.login("dan@test.com", "userOnePass").token

    with pytest.raises(InvalidCredentials):
        sessions.login("dan@test.com", "wrong-password")

    assert accounts.find_by_id(account.id).tokens == ()
    for token in (first, second):
        with pytest.raises(Unauthenticated):
            sessions.authenticate(token)


def test_logout_revokes_only_that_token(sessions, account):
    first = sessions.login("dan@test.com", "userOnePass").token
    second = sessions.login("dan@test.com", "userOnePass").token
    assert first != second

    sessions.logout(account.id, first)

    with pytest.raises(Unauthenticated):
        sessions.authenticate(first)
    assert sessions.authenticate(second).id == account.id


def test_logout_keeps_other_entries(sessions, accounts, account):
    accounts.append_token(account.id, TokenEntry(purpose=AUTH_PURPOSE, token="other-client"))
    token = sessions.login("dan@test.com", "userOnePass").token

    sessions.logout(account.id, token)

    assert accounts.find_by_id(account.id).tokens == (TokenEntry(purpose="auth", token="other-client"),)


def test_logout_is_idempotent(sessions, account):
    token = sessions.login("dan@test.com", "userOnePass").token
    sessions.logout(account.id, token)
    sessions.logout(account.id, token)


def test_logout_unknown_account(sessions):
    with pytest.raises(AccountNotFound):
        sessions.logout(MISSING_ID, "token")


def test_valid_signature_but_never_issued(sessions, codec, account):
    with pytest.raises(Unauthenticated):
        sessions.authenticate(codec.issue(account.id, AUTH_PURPOSE))


def test_token_for_missing_account(sessions, codec):
    with pytest.raises(Unauthenticated):
        sessions.authenticate(codec.issue(MISSING_ID, AUTH_PURPOSE))


def test_wrong_purpose_is_rejected(sessions, accounts, codec, account):
    token = codec.issue(account.id, "reset")
    accounts.append_token(account.id, TokenEntry(purpose="reset", token=token))
    with pytest.raises(Unauthenticated):
        sessions.authenticate(token)


def test_garbage_token(sessions):
    with pytest.raises(Unauthenticated):
        sessions.authenticate("not-a-token")


def test_store_operations_on_missing_account(accounts):
    with pytest.raises(AccountNotFound):
        accounts.append_token(MISSING_ID, TokenEntry(purpose="auth", token="t"))
    with pytest.raises(AccountNotFound):
        accounts.clear_tokens(MISSING_ID)
    with pytest.raises(AccountNotFound):
        accounts.remove_token("123", "t")
