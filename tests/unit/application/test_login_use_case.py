"""
Name: Login / Profile Use Case Tests

Responsibilities:
  - Successful login issues a verifiable token for the stored identity
  - Unknown email and wrong password are indistinguishable
  - Disabled accounts are reported as ACCOUNT_DISABLED
"""

import pytest

from daily_report.application.usecases import (
    GetProfileUseCase,
    LoginUseCase,
    UseCaseErrorCode,
)
from daily_report.application.usecases.auth import INVALID_CREDENTIALS_MESSAGE
from daily_report.identity.users import UserRole

pytestmark = pytest.mark.unit

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def login(repos, roster, token_service) -> LoginUseCase:
    return LoginUseCase(repos.sales_persons, token_service)


def test_login_issues_token_for_stored_identity(login, roster, token_service):
    result = login.execute("  Manager@Example.com ", DEFAULT_PASSWORD)

    assert result.error is None
    outcome = result.value
    assert outcome.user.id == roster.manager.id

    payload = token_service.verify(outcome.issued.token).payload
    assert payload.user_id == roster.manager.id
    assert payload.email == "manager@example.com"
    assert payload.role is UserRole.MANAGER


@pytest.mark.parametrize(
    "email,password",
    [
        ("nobody@example.com", DEFAULT_PASSWORD),
        ("member@example.com", "wrong-password"),
        ("", DEFAULT_PASSWORD),
    ],
)
def test_bad_credentials_share_one_error(login, email, password):
    result = login.execute(email, password)

    assert result.error.code == UseCaseErrorCode.INVALID_CREDENTIALS
    assert result.error.message == INVALID_CREDENTIALS_MESSAGE


def test_disabled_account_is_reported(login):
    result = login.execute("disabled@example.com", DEFAULT_PASSWORD)

    assert result.error.code == UseCaseErrorCode.ACCOUNT_DISABLED


def test_profile_includes_manager(repos, roster):
    view = GetProfileUseCase(repos.sales_persons).execute(roster.member.id).value

    assert view.person.email == "member@example.com"
    assert view.manager.name == "Manager"


def test_profile_of_unknown_person(repos, roster):
    result = GetProfileUseCase(repos.sales_persons).execute(999)

    assert result.error.code == UseCaseErrorCode.NOT_FOUND
