"""
Name: Master Data Use Case Tests (sales persons, customers)

Responsibilities:
  - Only admins write master data
  - Duplicate codes/emails map to their dedicated error codes
  - Manager references must exist and never point at self
  - Deactivation is soft and never applies to the caller
"""

import pytest

from daily_report.application.usecases import (
    CreateCustomerUseCase,
    CreateSalesPersonUseCase,
    CustomerChanges,
    DeactivateCustomerUseCase,
    DeactivateSalesPersonUseCase,
    GetCustomerUseCase,
    GetSalesPersonUseCase,
    ListCustomersUseCase,
    ListSalesPersonsUseCase,
    NewCustomer,
    NewSalesPerson,
    SalesPersonChanges,
    UpdateCustomerUseCase,
    UpdateSalesPersonUseCase,
    UseCaseErrorCode,
)
from daily_report.crosscutting.pagination import PageRequest
from daily_report.identity.passwords import verify_password
from daily_report.identity.users import UserRole

pytestmark = pytest.mark.unit


def _new_person(**overrides) -> NewSalesPerson:
    fields = {
        "employee_code": "EMP100",
        "name": "New Hire",
        "email": "new.hire@example.com",
        "password": "welcome-123",
    }
    fields.update(overrides)
    return NewSalesPerson(**fields)


class TestSalesPersonQueries:
    def test_list_is_name_ordered_and_filterable(self, repos, roster):
        use_case = ListSalesPersonsUseCase(repos.sales_persons)

        everyone = use_case.execute(page=PageRequest()).value
        managers = use_case.execute(page=PageRequest(), role=UserRole.MANAGER).value
        inactive = use_case.execute(page=PageRequest(), is_active=False).value

        names = [v.person.name for v in everyone.items]
        assert names == sorted(names)
        assert everyone.total_count == 7
        assert {v.person.id for v in managers.items} == {
            roster.manager.id,
            roster.other_manager.id,
        }
        assert [v.person.id for v in inactive.items] == [roster.disabled.id]

    def test_list_resolves_manager(self, repos, roster):
        page = ListSalesPersonsUseCase(repos.sales_persons).execute(
            page=PageRequest(), role=UserRole.MEMBER, is_active=True
        ).value

        managers = {v.person.name: v.manager.name for v in page.items}
        assert managers["Member"] == "Manager"
        assert managers["Outsider"] == "Other Manager"

    def test_detail_lists_active_subordinates(self, repos, roster):
        detail = GetSalesPersonUseCase(repos.sales_persons).execute(
            roster.manager.id
        ).value

        assert detail.view.person.id == roster.manager.id
        assert [p.name for p in detail.subordinates] == ["Member", "Peer"]

    def test_unknown_person_is_not_found(self, repos, roster):
        result = GetSalesPersonUseCase(repos.sales_persons).execute(999)

        assert result.error.code == UseCaseErrorCode.NOT_FOUND


class TestCreateSalesPerson:
    def test_admin_creates_person_with_hashed_password(self, repos, roster):
        result = CreateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, _new_person(manager_id=roster.manager.id)
        )

        view = result.value
        assert view.person.employee_code == "EMP100"
        assert view.manager.id == roster.manager.id
        stored = repos.sales_persons.get_sales_person(view.person.id)
        assert stored.password_hash != "welcome-123"
        assert verify_password("welcome-123", stored.password_hash)

    @pytest.mark.parametrize("who", ["manager", "member"])
    def test_non_admin_is_forbidden(self, repos, roster, who):
        result = CreateSalesPersonUseCase(repos.sales_persons).execute(
            getattr(roster, who), _new_person()
        )

        assert result.error.code == UseCaseErrorCode.FORBIDDEN

    def test_duplicate_employee_code(self, repos, roster):
        result = CreateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, _new_person(employee_code="EMP003")
        )

        assert result.error.code == UseCaseErrorCode.DUPLICATE_EMPLOYEE_CODE

    def test_duplicate_email_ignores_case(self, repos, roster):
        result = CreateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, _new_person(email="Member@Example.com")
        )

        assert result.error.code == UseCaseErrorCode.DUPLICATE_EMAIL

    def test_unknown_manager_is_invalid(self, repos, roster):
        result = CreateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, _new_person(manager_id=999)
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR


class TestUpdateSalesPerson:
    def _changes(self, **overrides) -> SalesPersonChanges:
        fields = {
            "name": "Member Renamed",
            "email": "member@example.com",
            "role": UserRole.MEMBER,
            "manager_id": None,
        }
        fields.update(overrides)
        return SalesPersonChanges(**fields)

    def test_admin_updates_person_and_keeps_password(self, repos, roster):
        before = repos.sales_persons.get_sales_person(roster.member.id)

        result = UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin,
            roster.member.id,
            self._changes(role=UserRole.MANAGER, manager_id=roster.other_manager.id),
        )

        view = result.value
        assert view.person.name == "Member Renamed"
        assert view.person.role == UserRole.MANAGER
        assert view.manager.id == roster.other_manager.id
        after = repos.sales_persons.get_sales_person(roster.member.id)
        assert after.password_hash == before.password_hash

    def test_new_password_is_rehashed(self, repos, roster):
        UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, roster.member.id, self._changes(password="rotated-pass")
        )

        stored = repos.sales_persons.get_sales_person(roster.member.id)
        assert verify_password("rotated-pass", stored.password_hash)

    def test_person_cannot_manage_themselves(self, repos, roster):
        result = UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, roster.member.id, self._changes(manager_id=roster.member.id)
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_email_taken_by_someone_else(self, repos, roster):
        result = UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, roster.member.id, self._changes(email="peer@example.com")
        )

        assert result.error.code == UseCaseErrorCode.DUPLICATE_EMAIL

    def test_admin_cannot_deactivate_self_through_update(self, repos, roster):
        result = UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin,
            roster.admin.id,
            self._changes(
                name="Admin", email="admin@example.com", role=UserRole.ADMIN,
                is_active=False,
            ),
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_unknown_person_is_not_found(self, repos, roster):
        result = UpdateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, 999, self._changes()
        )

        assert result.error.code == UseCaseErrorCode.NOT_FOUND


class TestDeactivateSalesPerson:
    def test_admin_deactivates_person(self, repos, roster):
        result = DeactivateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, roster.peer.id
        )

        assert result.value.person.is_active is False
        assert repos.sales_persons.get_sales_person(roster.peer.id) is not None

    def test_admin_cannot_deactivate_self(self, repos, roster):
        result = DeactivateSalesPersonUseCase(repos.sales_persons).execute(
            roster.admin, roster.admin.id
        )

        assert result.error.code == UseCaseErrorCode.VALIDATION_ERROR

    def test_manager_is_forbidden(self, repos, roster):
        result = DeactivateSalesPersonUseCase(repos.sales_persons).execute(
            roster.manager, roster.member.id
        )

        assert result.error.code == UseCaseErrorCode.FORBIDDEN


class TestCustomers:
    def test_keyword_matches_name_or_code(self, repos, roster):
        use_case = ListCustomersUseCase(repos.customers)

        by_name = use_case.execute(page=PageRequest(), keyword="  acme ").value
        by_code = use_case.execute(page=PageRequest(), keyword="c002").value
        active = use_case.execute(page=PageRequest(), is_active=True).value

        assert [c.name for c in by_name.items] == ["Acme Corp"]
        assert [c.customer_code for c in by_code.items] == ["C002"]
        assert [c.customer_code for c in active.items] == ["C001", "C002"]

    def test_get_unknown_customer(self, repos, roster):
        result = GetCustomerUseCase(repos.customers).execute(999)

        assert result.error.code == UseCaseErrorCode.NOT_FOUND

    def test_admin_creates_customer(self, repos, roster):
        result = CreateCustomerUseCase(repos.customers).execute(
            roster.admin,
            NewCustomer(customer_code="C010", name="Initech", address="", phone=""),
        )

        customer = result.value
        assert customer.customer_code == "C010"
        assert customer.address is None
        assert customer.phone is None

    def test_duplicate_customer_code(self, repos, roster):
        result = CreateCustomerUseCase(repos.customers).execute(
            roster.admin, NewCustomer(customer_code="C001", name="Again")
        )

        assert result.error.code == UseCaseErrorCode.DUPLICATE_CUSTOMER_CODE

    def test_member_cannot_write_customers(self, repos, roster):
        create = CreateCustomerUseCase(repos.customers).execute(
            roster.member, NewCustomer(customer_code="C011", name="Nope")
        )
        update = UpdateCustomerUseCase(repos.customers).execute(
            roster.member, roster.customer_id, CustomerChanges(name="Nope")
        )

        assert create.error.code == UseCaseErrorCode.FORBIDDEN
        assert update.error.code == UseCaseErrorCode.FORBIDDEN

    def test_admin_updates_customer(self, repos, roster):
        result = UpdateCustomerUseCase(repos.customers).execute(
            roster.admin,
            roster.customer_id,
            CustomerChanges(name="Acme Holdings", phone="03-1234-5678"),
        )

        assert result.value.name == "Acme Holdings"
        assert result.value.phone == "03-1234-5678"
        assert result.value.customer_code == "C001"

    def test_deactivate_is_soft(self, repos, roster):
        result = DeactivateCustomerUseCase(repos.customers).execute(
            roster.admin, roster.second_customer_id
        )

        assert result.value.is_active is False
        assert result.value.name == "Globex"

    def test_update_unknown_customer(self, repos, roster):
        result = UpdateCustomerUseCase(repos.customers).execute(
            roster.admin, 999, CustomerChanges(name="Ghost")
        )

        assert result.error.code == UseCaseErrorCode.NOT_FOUND
