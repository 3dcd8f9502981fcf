"""
Unit tests for customer resolution and provisioning

Tests:
- Search term priority
- Exact-match preference and first-candidate fallback
- Failed searches degrade to "not found"
- Customer create body and response shapes
"""
import pytest
import httpx

from kiosk_backend.errors import ExternalServiceError
from kiosk_backend.models.checkin import CheckInSubmission
from kiosk_backend.services.customers import (
    CustomerProvisioner,
    CustomerResolver,
    build_search_term,
    ensure_customer_id,
    pick_candidate,
)
from kiosk_backend.services.repairshopr import RepairShoprClient
from kiosk_backend.tests.conftest import FakeCRM


def make_contact(**fields) -> CheckInSubmission:
    base = {"first_name": "Ann", "last_name": "Lee", "email": "a@x.com", "mobile": "5551234567"}
    base.update(fields)
    return CheckInSubmission(**base)


def make_resolver(settings, crm) -> CustomerResolver:
    return CustomerResolver(RepairShoprClient(settings, transport=crm.transport))


def make_provisioner(settings, crm) -> CustomerProvisioner:
    return CustomerProvisioner(RepairShoprClient(settings, transport=crm.transport))


class TestSearchTerm:
    """Test build_search_term priority"""

    def test_email_first(self):
        assert build_search_term(make_contact(phone="555")) == "a@x.com"

    def test_mobile_when_no_email(self):
        assert build_search_term(make_contact(email="  ")) == "5551234567"

    def test_phone_when_no_email_or_mobile(self):
        assert build_search_term(make_contact(email="", mobile="", phone="555-0100")) == "555-0100"

    def test_full_name_last(self):
        assert build_search_term(make_contact(email=None, mobile=None)) == "Ann Lee"

    def test_capped_at_120(self):
        term = build_search_term(make_contact(email="e" * 300))
        assert len(term) == 120


class TestPickCandidate:
    """Test candidate selection"""

    def test_exact_email_match_listed_second(self):
        candidates = [
            {"id": 1, "email": "other@x.com", "mobile": "111"},
            {"id": 2, "email": "a@x.com", "mobile": "222"},
        ]
        assert pick_candidate(candidates, make_contact()) == 2

    def test_exact_phone_match(self):
        candidates = [
            {"id": 1, "email": "other@x.com"},
            {"id": 3, "phone": "555-0100"},
        ]
        contact = make_contact(email="new@x.com", mobile="999", phone="555-0100")
        assert pick_candidate(candidates, contact) == 3

    def test_first_exact_match_wins(self):
        candidates = [
            {"id": 4, "mobile": "5551234567"},
            {"id": 5, "email": "a@x.com"},
        ]
        assert pick_candidate(candidates, make_contact()) == 4

    def test_no_exact_match_falls_back_to_first(self):
        candidates = [{"id": 7, "email": "someone@else.com"}]
        assert pick_candidate(candidates, make_contact()) == 7

    def test_empty_values_never_match(self):
        """A blank phone on both sides is not a match"""
        candidates = [
            {"id": 8, "email": "x@y.com", "phone": ""},
            {"id": 9, "email": "a@x.com"},
        ]
        assert pick_candidate(candidates, make_contact(phone="")) == 9

    def test_no_candidates(self):
        assert pick_candidate([], make_contact()) is None


class TestCustomerResolver:
    """Test CustomerResolver.resolve against a fake CRM"""

    @pytest.mark.asyncio
    async def test_returns_exact_match(self, settings):
        crm = FakeCRM(search=(200, {"customers": [
            {"id": 10, "email": "b@x.com"},
            {"id": 11, "email": "a@x.com"},
        ]}))

        result = await make_resolver(settings, crm).resolve(make_contact())

        assert result == 11
        request = crm.calls("GET", "customers")[0]
        assert request.url.params["query"] == "a@x.com"
        assert request.url.params["api_key"] == "rs-test-key"

    @pytest.mark.asyncio
    async def test_bare_list_response(self, settings):
        crm = FakeCRM(search=(200, [{"id": 12, "email": "z@x.com"}]))

        assert await make_resolver(settings, crm).resolve(make_contact()) == 12

    @pytest.mark.asyncio
    async def test_zero_candidates_is_not_found(self, settings, crm):
        assert await make_resolver(settings, crm).resolve(make_contact()) is None

    @pytest.mark.asyncio
    async def test_http_failure_is_not_found(self, settings):
        crm = FakeCRM(search=(500, {"message": "boom"}))

        assert await make_resolver(settings, crm).resolve(make_contact()) is None

    @pytest.mark.asyncio
    async def test_transport_failure_is_not_found(self, settings):
        crm = FakeCRM(search=httpx.ConnectError("connection refused"))

        assert await make_resolver(settings, crm).resolve(make_contact()) is None


class TestCustomerProvisioner:
    """Test CustomerProvisioner.create"""

    @pytest.mark.asyncio
    async def test_body_omits_empty_optional_fields(self, settings, crm):
        contact = make_contact(city="  Billings ", zip="", business_name=None)

        await make_provisioner(settings, crm).create(contact)

        body = crm.body(crm.calls("POST", "customers")[0])
        assert body == {
            "firstname": "Ann",
            "lastname": "Lee",
            "email": "a@x.com",
            "mobile": "5551234567",
            "city": "Billings",
        }

    @pytest.mark.asyncio
    async def test_mobile_and_email_always_sent(self, settings, crm):
        await make_provisioner(settings, crm).create(make_contact(email="", mobile=None))

        body = crm.body(crm.calls("POST", "customers")[0])
        assert body["email"] == ""
        assert body["mobile"] == ""

    @pytest.mark.asyncio
    async def test_field_caps(self, settings, crm):
        contact = make_contact(first_name="f" * 200, zip="9" * 50, state="s" * 50)

        await make_provisioner(settings, crm).create(contact)

        body = crm.body(crm.calls("POST", "customers")[0])
        assert len(body["firstname"]) == 80
        assert len(body["zip"]) == 20
        assert len(body["state"]) == 40

    @pytest.mark.asyncio
    async def test_top_level_id_preferred(self, settings):
        crm = FakeCRM(create_customer=(200, {"id": 600, "customer": {"id": 601}}))

        assert await make_provisioner(settings, crm).create(make_contact()) == 600

    @pytest.mark.asyncio
    async def test_nested_id(self, settings, crm):
        assert await make_provisioner(settings, crm).create(make_contact()) == 501

    @pytest.mark.asyncio
    async def test_crm_error_body_is_carried(self, settings):
        crm = FakeCRM(create_customer=(422, {"message": ["Email has already been taken"]}))

        with pytest.raises(ExternalServiceError) as exc_info:
            await make_provisioner(settings, crm).create(make_contact())

        assert exc_info.value.detail == {"message": ["Email has already been taken"]}
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_missing_id_is_an_error(self, settings):
        crm = FakeCRM(create_customer=(200, {"customer": {}}))

        with pytest.raises(ExternalServiceError):
            await make_provisioner(settings, crm).create(make_contact())


class TestEnsureCustomerId:
    """Test resolve-then-create flow"""

    @pytest.mark.asyncio
    async def test_existing_customer_skips_create(self, settings):
        crm = FakeCRM(search=(200, {"customers": [{"id": 42, "email": "a@x.com"}]}))

        customer_id = await ensure_customer_id(
            make_resolver(settings, crm), make_provisioner(settings, crm), make_contact()
        )

        assert customer_id == 42
        assert crm.calls("POST", "customers") == []

    @pytest.mark.asyncio
    async def test_miss_creates_customer(self, settings, crm):
        customer_id = await ensure_customer_id(
            make_resolver(settings, crm), make_provisioner(settings, crm), make_contact()
        )

        assert customer_id == 501
        assert len(crm.calls("POST", "customers")) == 1
