"""Async adapter around the Braintree Python SDK."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

import braintree
import pydantic

from braintree_async.exceptions import ConfigurationError, is_not_found
from braintree_async.gateway.abc import Gateway as AbstractGateway
from braintree_async.gateway.sdk._requests import (
    _build_clone_request,
    _build_payment_method_request,
    _build_subscription_request,
    _build_transaction_request,
    _convert_config_to_sdk,
)
from braintree_async.settings import SETTINGS
from braintree_async.types import Amount, GatewayConfig
from braintree_async.validation import require, require_one_of

_LOGGER = logging.getLogger(__name__)


class BraintreeGateway(AbstractGateway):
    """Gateway implementation backed by ``braintree.BraintreeGateway``.

    The SDK is synchronous, so every call runs in a worker thread and the event
    loop is never blocked. Each instance owns one SDK gateway handle, built from
    the configuration given at construction.

    Example:
        ```python
        from braintree_async import BraintreeGateway

        gateway = BraintreeGateway(
            environment="sandbox",
            merchant_id="<MERCHANT_ID>",
            public_key="<PUBLIC_KEY>",
            private_key="<PRIVATE_KEY>",
        )

        token = await gateway.generate_client_token()
        result = await gateway.create_transaction(15, "fake-valid-nonce")
        customer = await gateway.find_one_and_update(
            "customer-1", {"last_name": "bob"}, upsert=True
        )
        ```
    """

    def __init__(
        self,
        *,
        environment: str | braintree.Environment | None = SETTINGS.braintree_environment,
        merchant_id: str | None = SETTINGS.braintree_merchant_id,
        public_key: str | None = SETTINGS.braintree_public_key,
        private_key: str | None = SETTINGS.braintree_private_key,
        client: braintree.BraintreeGateway | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the gateway.

        Args:
            environment: Environment name, case-insensitive (``sandbox``,
                ``production``), or an SDK Environment constant
            merchant_id: Braintree merchant id
            public_key: Braintree public key
            private_key: Braintree private key
            client: Optional prebuilt SDK gateway to use instead of building one
            logger: Optional logger, defaults to this module's logger

        Raises:
            ConfigurationError: If any configuration field is None or empty, or
                the environment name is unknown
        """
        if not environment:
            raise ConfigurationError("Configuration requires environment")
        if not merchant_id:
            raise ConfigurationError("Configuration requires merchant_id")
        if not public_key:
            raise ConfigurationError("Configuration requires public_key")
        if not private_key:
            raise ConfigurationError("Configuration requires private_key")

        self._logger = logger or _LOGGER
        self._merchant_id = merchant_id
        if client is None:
            sdk_config = _convert_config_to_sdk(
                GatewayConfig.model_construct(
                    environment=environment,
                    merchant_id=merchant_id,
                    public_key=public_key,
                    private_key=private_key,
                )
            )
            client = braintree.BraintreeGateway(sdk_config)
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig | Mapping[str, Any] | None,
        *,
        client: braintree.BraintreeGateway | None = None,
        logger: logging.Logger | None = None,
    ) -> "BraintreeGateway":
        """Build a gateway from a configuration record.

        Keys may be snake_case (``merchant_id``) or camelCase (``merchantId``).

        Raises:
            ConfigurationError: If config is None, a field is missing or a
                field has the wrong type
        """
        if config is None:
            raise ConfigurationError(
                "A configuration is required to instantiate the Braintree gateway"
            )
        if not isinstance(config, GatewayConfig):
            try:
                config = GatewayConfig.model_validate(config)
            except pydantic.ValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {e}") from e
        return cls(
            environment=config.environment,
            merchant_id=config.merchant_id,
            public_key=config.public_key,
            private_key=config.private_key,
            client=client,
            logger=logger,
        )

    @property
    def client(self) -> braintree.BraintreeGateway:
        """The underlying SDK gateway."""
        return self._client

    async def _call(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Run one SDK call off the event loop.

        The SDK's return value is returned as is; its exceptions propagate
        unchanged. Not-found is logged at debug since callers such as
        ``find_one_and_update`` expect it.
        """
        self._logger.debug(f"Braintree {operation} (merchant_id: {self._merchant_id})")
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as e:
            if is_not_found(e):
                self._logger.debug(f"Braintree {operation}: not found")
            else:
                self._logger.error(
                    f"Braintree {operation} failed: {type(e).__name__} {e}"
                )
            raise

    # Client tokens

    async def generate_client_token(self, params: Mapping[str, Any] | None = None) -> Any:
        return await self._call(
            "client_token.generate", self._client.client_token.generate, dict(params or {})
        )

    # Transactions

    async def create_transaction(
        self,
        amount: Amount,
        payment_method_nonce: str | None = None,
        *,
        payment_method_token: str | None = None,
        options: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Any:
        require(amount, "amount", "Amount required to create transaction")
        require_one_of(
            {
                "payment_method_nonce": payment_method_nonce,
                "payment_method_token": payment_method_token,
            },
            "Exactly one of nonce or token required to create transaction",
        )
        request = _build_transaction_request(
            amount,
            payment_method_nonce=payment_method_nonce,
            payment_method_token=payment_method_token,
            options=options,
            fields=fields,
        )
        return await self._call("transaction.sale", self._client.transaction.sale, request)

    async def find_transaction(self, transaction_id: str) -> Any:
        require(transaction_id, "transaction_id", "Transaction ID required")
        return await self._call(
            "transaction.find", self._client.transaction.find, transaction_id
        )

    async def clone_transaction(
        self,
        transaction_id: str,
        amount: Amount,
        submit_for_settlement: bool | None = True,
    ) -> Any:
        require(
            transaction_id,
            "transaction_id",
            "Transaction id is required to clone a transaction",
        )
        require(amount, "amount", "Amount is required to clone transaction")
        request = _build_clone_request(amount, submit_for_settlement)
        return await self._call(
            "transaction.clone_transaction",
            self._client.transaction.clone_transaction,
            transaction_id,
            request,
        )

    # Customers

    async def find_customer(self, customer_id: str) -> Any:
        require(customer_id, "customer_id", "id required to find customer")
        return await self._call("customer.find", self._client.customer.find, customer_id)

    async def create_customer(self, customer: Mapping[str, Any] | None = None) -> Any:
        return await self._call(
            "customer.create", self._client.customer.create, dict(customer or {})
        )

    async def update_customer(self, customer_id: str, update: Mapping[str, Any]) -> Any:
        require(customer_id, "customer_id", "id required to update customer")
        return await self._call(
            "customer.update",
            self._client.customer.update,
            customer_id,
            dict(update or {}),
        )

    async def delete_customer(self, customer_id: str) -> Any:
        require(customer_id, "customer_id", "id required to delete customer")
        return await self._call(
            "customer.delete", self._client.customer.delete, customer_id
        )

    # Payment methods

    async def create_payment_method(
        self, customer_id: str, payment_method_nonce: str, **fields: Any
    ) -> Any:
        require(
            customer_id,
            "customer_id",
            "Customer ID is required to create payment method",
        )
        require(
            payment_method_nonce,
            "payment_method_nonce",
            "Payment method nonce is required to create payment method",
        )
        request = _build_payment_method_request(customer_id, payment_method_nonce, fields)
        return await self._call(
            "payment_method.create", self._client.payment_method.create, request
        )

    async def find_payment_method(self, token: str) -> Any:
        require(token, "token", "No token provided to find payment method")
        return await self._call(
            "payment_method.find", self._client.payment_method.find, token
        )

    async def delete_payment_method(self, token: str) -> Any:
        require(token, "token", "Token is required to delete payment method")
        return await self._call(
            "payment_method.delete", self._client.payment_method.delete, token
        )

    # Plans and subscriptions

    async def find_all_plans(self) -> Any:
        return await self._call("plan.all", self._client.plan.all)

    async def create_subscription(
        self, plan_id: str, payment_method_token: str, **fields: Any
    ) -> Any:
        require(plan_id, "plan_id", "You need to provide plan ID (name)")
        require(
            payment_method_token,
            "payment_method_token",
            "Payment method token is required to create subscription",
        )
        request = _build_subscription_request(plan_id, payment_method_token, fields)
        return await self._call(
            "subscription.create", self._client.subscription.create, request
        )

    async def find_subscription(self, subscription_id: str) -> Any:
        require(
            subscription_id,
            "subscription_id",
            "Subscription ID is required to find subscription",
        )
        return await self._call(
            "subscription.find", self._client.subscription.find, subscription_id
        )

    async def cancel_subscription(self, subscription_id: str) -> Any:
        require(
            subscription_id,
            "subscription_id",
            "Subscription ID is required to cancel subscription",
        )
        return await self._call(
            "subscription.cancel", self._client.subscription.cancel, subscription_id
        )
