"""Unit tests for the upsert and bulk customer helpers."""

import asyncio
import logging
import threading
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from braintree.exceptions import AuthorizationError, NotFoundError, ServerError

from braintree_async import BraintreeGateway
from braintree_async.exceptions import ValidationError

CREDENTIALS = {
    "environment": "sandbox",
    "merchant_id": "test-merchant",
    "public_key": "test-public",
    "private_key": "test-private",
}


@pytest.fixture
def client() -> MagicMock:
    """Create a mock Braintree SDK gateway."""
    return MagicMock()


@pytest.fixture
def gateway(client: MagicMock) -> BraintreeGateway:
    return BraintreeGateway(**CREDENTIALS, client=client)


class TestFindOneAndUpdate:
    """Test cases for the update-or-create helper."""

    @pytest.mark.asyncio
    async def test_update_success_skips_create(self, gateway, client):
        """Test a successful update is returned and no create is attempted."""
        updated = MagicMock(is_success=True)
        client.customer.update.return_value = updated

        result = await gateway.find_one_and_update(
            "unique123", {"last_name": "bob"}, upsert=True
        )

        assert result is updated
        client.customer.update.assert_called_once_with("unique123", {"last_name": "bob"})
        client.customer.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found_with_upsert_creates(self, gateway, client):
        """Test not found plus upsert falls back to create with the id attached."""
        client.customer.update.side_effect = NotFoundError()
        created = MagicMock(is_success=True)
        created.customer.last_name = "bob"
        client.customer.create.return_value = created
        update = {"last_name": "bob"}

        result = await gateway.find_one_and_update("unique123", update, True)

        assert result.customer.last_name == "bob"
        client.customer.create.assert_called_once_with(
            {"last_name": "bob", "id": "unique123"}
        )
        # Caller's payload is not mutated
        assert update == {"last_name": "bob"}

    @pytest.mark.asyncio
    async def test_not_found_without_upsert_raises(self, gateway, client):
        error = NotFoundError()
        client.customer.update.side_effect = error

        with pytest.raises(NotFoundError) as exc_info:
            await gateway.find_one_and_update("unique123", {"last_name": "bob"})

        assert exc_info.value is error
        client.customer.create.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error_cls", [AuthorizationError, ServerError])
    async def test_other_errors_never_fall_back(self, gateway, client, error_cls):
        """Test only the not-found classification triggers create."""
        client.customer.update.side_effect = error_cls()

        with pytest.raises(error_cls):
            await gateway.find_one_and_update("unique123", {"last_name": "bob"}, True)

        client.customer.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_failure_after_fallback_propagates(self, gateway, client):
        client.customer.update.side_effect = NotFoundError()
        client.customer.create.side_effect = ServerError()

        with pytest.raises(ServerError):
            await gateway.find_one_and_update("unique123", {"last_name": "bob"}, True)

    @pytest.mark.asyncio
    async def test_update_id_is_replaced_by_target_id(self, gateway, client):
        client.customer.update.side_effect = NotFoundError()

        await gateway.find_one_and_update(
            "unique123", {"id": "stale", "last_name": "bob"}, True
        )

        client.customer.create.assert_called_once_with(
            {"id": "unique123", "last_name": "bob"}
        )

    @pytest.mark.asyncio
    async def test_missing_id_with_upsert_creates_without_id(self, gateway, client):
        """Test an id-less upsert goes straight to create and lets the gateway pick the id."""
        await gateway.find_one_and_update(None, {"id": "ignored", "last_name": "bob"}, True)

        client.customer.update.assert_not_called()
        client.customer.create.assert_called_once_with({"last_name": "bob"})

    @pytest.mark.asyncio
    async def test_missing_id_without_upsert_is_validation_error(self, gateway, client):
        with pytest.raises(ValidationError) as exc_info:
            await gateway.find_one_and_update("", {"last_name": "bob"}, False)

        assert exc_info.value.field == "customer_id"
        assert client.method_calls == []

    @pytest.mark.asyncio
    async def test_whitespace_id_with_upsert_creates_without_id(self, gateway, client):
        """Test a whitespace id is blank, the same as None or an empty string."""
        await gateway.find_one_and_update("  ", {"last_name": "bob"}, True)

        client.customer.update.assert_not_called()
        client.customer.create.assert_called_once_with({"last_name": "bob"})

    @pytest.mark.asyncio
    async def test_not_found_upsert_logs_no_error(self, gateway, client, caplog):
        client.customer.update.side_effect = NotFoundError()
        client.customer.create.return_value = "created"

        with caplog.at_level(logging.DEBUG):
            result = await gateway.find_one_and_update(
                "unique123", {"last_name": "bob"}, True
            )

        assert result == "created"
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestCreateMultipleCustomers:
    """Test cases for concurrent customer creation."""

    @pytest.mark.asyncio
    async def test_none_is_rejected_without_remote_calls(self, gateway, client):
        with pytest.raises(ValidationError, match="customers required"):
            await gateway.create_multiple_customers(None)

        assert client.method_calls == []

    @pytest.mark.asyncio
    async def test_single_record_is_wrapped(self, gateway, client):
        client.customer.create.return_value = "created"

        results = await gateway.create_multiple_customers({"id": "boogly1"})

        assert results == ["created"]
        client.customer.create.assert_called_once_with({"id": "boogly1"})

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self, gateway, client):
        client.customer.create.side_effect = lambda params: f"created:{params['id']}"
        users = [{"id": "boogly1"}, {"id": "boogly2"}, {"id": "boogly3"}]

        results = await gateway.create_multiple_customers(users)

        assert results == ["created:boogly1", "created:boogly2", "created:boogly3"]
        assert client.customer.create.call_count == 3

    @pytest.mark.asyncio
    async def test_empty_sequence_resolves_empty(self, gateway, client):
        assert await gateway.create_multiple_customers([]) == []
        client.customer.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_are_started_concurrently(self):
        """Test every create starts before any of them completes."""
        started: list[str] = []
        all_started = asyncio.Event()

        class BarrierGateway(BraintreeGateway):
            async def create_customer(self, customer=None):
                started.append(customer["id"])
                if len(started) == 3:
                    all_started.set()
                await all_started.wait()
                return customer["id"]

        gateway = BarrierGateway(**CREDENTIALS, client=MagicMock())

        results = await asyncio.wait_for(
            gateway.create_multiple_customers([{"id": "a"}, {"id": "b"}, {"id": "c"}]),
            timeout=1,
        )

        assert results == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_first_failure_is_raised_without_rollback(self, gateway, client):
        """Test a failing create is reported while siblings stay created."""
        error = AuthorizationError()
        lock = threading.Lock()
        calls = []
        all_called = threading.Event()

        def create(params):
            with lock:
                calls.append(params["id"])
                if len(calls) == 3:
                    all_called.set()
            if params["id"] == "boogly2":
                raise error
            return f"created:{params['id']}"

        client.customer.create.side_effect = create

        with pytest.raises(AuthorizationError) as exc_info:
            await gateway.create_multiple_customers(
                [{"id": "boogly1"}, {"id": "boogly2"}, {"id": "boogly3"}]
            )

        assert exc_info.value is error
        assert await asyncio.to_thread(all_called.wait, 1)
        assert client.customer.create.call_count == 3
        client.customer.delete.assert_not_called()


class TestDeleteMultipleCustomers:
    """Test cases for concurrent customer deletion."""

    @pytest.mark.asyncio
    async def test_none_is_rejected_without_remote_calls(self, gateway, client):
        with pytest.raises(ValidationError, match="customers required"):
            await gateway.delete_multiple_customers(None)

        assert client.method_calls == []

    @pytest.mark.asyncio
    async def test_deletes_by_record_id(self, gateway, client):
        users = [{"id": "boogly1"}, {"id": "boogly2"}, {"id": "boogly3"}]

        results = await gateway.delete_multiple_customers(users)

        assert len(results) == 3
        deleted = sorted(c.args[0] for c in client.customer.delete.call_args_list)
        assert deleted == ["boogly1", "boogly2", "boogly3"]

    @pytest.mark.asyncio
    async def test_accepts_ids_and_objects(self, gateway, client):
        await gateway.delete_multiple_customers(["a", SimpleNamespace(id="b")])

        deleted = sorted(c.args[0] for c in client.customer.delete.call_args_list)
        assert deleted == ["a", "b"]

    @pytest.mark.asyncio
    async def test_single_id_is_wrapped(self, gateway, client):
        await gateway.delete_multiple_customers("boogly1")
        client.customer.delete.assert_called_once_with("boogly1")

    @pytest.mark.asyncio
    async def test_record_without_id_fails(self, gateway, client):
        with pytest.raises(ValidationError) as exc_info:
            await gateway.delete_multiple_customers([{"first_name": "nobody"}])

        assert exc_info.value.field == "customer_id"
        client.customer.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found_is_propagated(self, gateway, client):
        client.customer.delete.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await gateway.delete_multiple_customers([{"id": "gone"}])
