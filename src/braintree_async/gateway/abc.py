import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from braintree_async.exceptions import ValidationError, is_not_found
from braintree_async.types import Amount
from braintree_async.validation import is_blank

_LOGGER = logging.getLogger(__name__)


class Gateway(ABC):
    """Abstract base class defining the asynchronous payment gateway interface.

    Every operation is a coroutine that completes exactly once: it returns the
    remote result or raises. Operations with required arguments raise
    ``ValidationError`` before any remote call when one is missing.

    Subclasses must implement the single-entity operations. The composite
    helpers (``find_one_and_update``, ``create_multiple_customers`` and
    ``delete_multiple_customers``) are built on top of them here and perform no
    I/O of their own.
    """

    _logger: logging.Logger = _LOGGER

    # Client tokens

    @abstractmethod
    async def generate_client_token(self, params: Mapping[str, Any] | None = None) -> Any:
        """Generate a client token for a front-end client."""
        ...

    # Transactions

    @abstractmethod
    async def create_transaction(
        self,
        amount: Amount,
        payment_method_nonce: str | None = None,
        *,
        payment_method_token: str | None = None,
        options: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Any:
        """Create a sale.

        Args:
            amount: Amount to charge
            payment_method_nonce: Nonce from a client integration
            payment_method_token: Token of a vaulted payment method
            options: Optional sale options (``submit_for_settlement`` etc.)
            **fields: Any other sale parameters, passed through unchanged

        Raises:
            ValidationError: If amount is missing, or not exactly one of
                nonce and token is given
        """
        ...

    @abstractmethod
    async def find_transaction(self, transaction_id: str) -> Any: ...

    @abstractmethod
    async def clone_transaction(
        self,
        transaction_id: str,
        amount: Amount,
        submit_for_settlement: bool | None = True,
    ) -> Any:
        """Clone a transaction. Settlement is submitted unless explicitly False."""
        ...

    # Customers

    @abstractmethod
    async def find_customer(self, customer_id: str) -> Any: ...

    @abstractmethod
    async def create_customer(self, customer: Mapping[str, Any] | None = None) -> Any:
        """Create a customer. Without an ``id`` the gateway generates one."""
        ...

    @abstractmethod
    async def update_customer(self, customer_id: str, update: Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def delete_customer(self, customer_id: str) -> Any: ...

    # Payment methods

    @abstractmethod
    async def create_payment_method(
        self, customer_id: str, payment_method_nonce: str, **fields: Any
    ) -> Any: ...

    @abstractmethod
    async def find_payment_method(self, token: str) -> Any: ...

    @abstractmethod
    async def delete_payment_method(self, token: str) -> Any: ...

    # Plans and subscriptions

    @abstractmethod
    async def find_all_plans(self) -> Any: ...

    @abstractmethod
    async def create_subscription(
        self, plan_id: str, payment_method_token: str, **fields: Any
    ) -> Any: ...

    @abstractmethod
    async def find_subscription(self, subscription_id: str) -> Any: ...

    @abstractmethod
    async def cancel_subscription(self, subscription_id: str) -> Any: ...

    # Composite helpers

    async def find_one_and_update(
        self,
        customer_id: str | None,
        update: Mapping[str, Any] | None,
        upsert: bool = False,
    ) -> Any:
        """Update a customer, optionally creating it when it does not exist.

        Only the not-found classification triggers the create fallback; every
        other failure is raised as is.

        Args:
            customer_id: Id of the customer to update
            update: Fields to update, and to create the customer with on fallback
            upsert: Create the customer if the update reports not found

        Returns:
            The update result, or the create result when the fallback ran

        Raises:
            ValidationError: If customer_id is missing and upsert is False
        """
        if is_blank(customer_id):
            if not upsert:
                raise ValidationError(
                    "customer_id", "id required to update customer"
                )
            self._logger.debug("No customer id given, creating customer")
            return await self.create_customer(
                _upsert_create_request(None, update)
            )

        try:
            return await self.update_customer(customer_id, update or {})
        except Exception as e:
            if not (upsert and is_not_found(e)):
                raise
        self._logger.debug(f"Customer {customer_id} not found, creating...")
        return await self.create_customer(
            _upsert_create_request(customer_id, update)
        )

    async def create_multiple_customers(
        self, customers: Sequence[Mapping[str, Any]] | Mapping[str, Any] | None
    ) -> list[Any]:
        """Create several customers concurrently.

        All creates are started together. Returns their results in input order
        once every one succeeded, or raises the first failure. Customers
        created before a failure are not deleted.

        Raises:
            ValidationError: If customers is None
        """
        records = _as_list(customers)
        self._logger.debug(f"Creating {len(records)} customers")
        return list(
            await asyncio.gather(*(self.create_customer(record) for record in records))
        )

    async def delete_multiple_customers(
        self, customers: Sequence[Any] | Mapping[str, Any] | str | None
    ) -> list[Any]:
        """Delete several customers concurrently.

        Each element may be a customer record (mapping or object with an
        ``id``) or a bare customer id. Same completion rules as
        ``create_multiple_customers``: deletions that already succeeded are
        not undone if a sibling fails.

        Raises:
            ValidationError: If customers is None
        """
        records = _as_list(customers)
        self._logger.debug(f"Deleting {len(records)} customers")
        return list(
            await asyncio.gather(
                *(self.delete_customer(_customer_id_of(record)) for record in records)
            )
        )


def _as_list(records: Any) -> list[Any]:
    """Normalize a single record or a sequence of records to a list."""
    if records is None:
        raise ValidationError("customers", "customers required")
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
        return [records]
    return list(records)


def _customer_id_of(record: Any) -> Any:
    if isinstance(record, str):
        return record
    if isinstance(record, Mapping):
        return record.get("id")
    return getattr(record, "id", None)


def _upsert_create_request(
    customer_id: str | None, update: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Build create params from an update payload without touching the caller's dict.

    Without a customer id the ``id`` key is omitted and the gateway assigns one.
    """
    request = dict(update or {})
    request.pop("id", None)
    if not is_blank(customer_id):
        request["id"] = customer_id
    return request
