"""
===============================================================================
USE CASES: Login / Current profile
===============================================================================

Business Goal:
    Exchange credentials for a session token, and describe the caller.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    LoginUseCase, GetProfileUseCase

Responsibilities:
    - Normalize the email (trim/lower) before lookup.
    - Check the account state BEFORE the password, so a disabled account is
      reported as ACCOUNT_DISABLED.
    - Never distinguish "unknown email" from "wrong password".
    - Issue the token through TokenService.

Collaborators:
    - SalesPersonRepository
    - identity.passwords.verify_password
    - identity.tokens.TokenService

Error Mapping:
    - INVALID_CREDENTIALS: unknown email, wrong password
    - ACCOUNT_DISABLED:    is_active == False
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ...crosscutting.logger import logger
from ...domain.entities import SalesPerson, SalesPersonView
from ...domain.repositories import SalesPersonRepository
from ...identity.passwords import verify_password
from ...identity.tokens import IssuedToken, TokenService
from .results import Result, UseCaseErrorCode, not_found

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
ACCOUNT_DISABLED_MESSAGE = "This account has been disabled"


@dataclass(frozen=True)
class LoginOutcome:
    issued: IssuedToken
    user: SalesPerson


class LoginUseCase:
    def __init__(
        self, sales_persons: SalesPersonRepository, tokens: TokenService
    ) -> None:
        self._sales_persons = sales_persons
        self._tokens = tokens

    def execute(self, email: str, password: str) -> Result[LoginOutcome]:
        normalized_email = (email or "").strip().lower()
        user = self._sales_persons.get_by_email(normalized_email) if normalized_email else None

        if user is None:
            logger.info("login rejected: unknown email")
            return Result.fail(
                UseCaseErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
            )

        if not user.is_active:
            logger.warning(
                "login rejected: account disabled", extra={"sales_person_id": user.id}
            )
            return Result.fail(
                UseCaseErrorCode.ACCOUNT_DISABLED, ACCOUNT_DISABLED_MESSAGE
            )

        if not verify_password(password, user.password_hash):
            logger.info(
                "login rejected: wrong password", extra={"sales_person_id": user.id}
            )
            return Result.fail(
                UseCaseErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
            )

        issued = self._tokens.issue(user.id, user.email, user.role)
        logger.info("login succeeded", extra={"sales_person_id": user.id})
        return Result.ok(LoginOutcome(issued=issued, user=user))


class GetProfileUseCase:
    """The caller's own record with the manager resolved."""

    def __init__(self, sales_persons: SalesPersonRepository) -> None:
        self._sales_persons = sales_persons

    def execute(self, sales_person_id: int) -> Result[SalesPersonView]:
        view = self._sales_persons.get_view(sales_person_id)
        if view is None:
            return not_found("Sales person")
        return Result.ok(view)
