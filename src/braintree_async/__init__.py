"""braintree-async - Await your Braintree calls.

An asynchronous adapter around the Braintree Python SDK. Every customer,
transaction, payment method, plan and subscription call becomes a coroutine
that returns the SDK's result or raises the SDK's error, with required
arguments checked before anything is sent to the gateway.

On top of the single-call wrappers sit three helpers:
    - find_one_and_update: Update a customer, creating it when not found
    - create_multiple_customers: Create many customers concurrently
    - delete_multiple_customers: Delete many customers concurrently

Example:
    >>> from braintree_async import BraintreeGateway
    >>>
    >>> gateway = BraintreeGateway(
    ...     environment="sandbox",
    ...     merchant_id="<MERCHANT_ID>",
    ...     public_key="<PUBLIC_KEY>",
    ...     private_key="<PRIVATE_KEY>",
    ... )
    >>> result = await gateway.create_transaction(15, "fake-valid-nonce")
    >>> result.transaction.amount
    Decimal('15.00')
"""

from braintree_async.exceptions import (
    BraintreeAsyncError,
    ConfigurationError,
    ValidationError,
    is_not_found,
)
from braintree_async.gateway import BraintreeGateway, Gateway
from braintree_async.types import (
    CloneTransactionRequest,
    GatewayConfig,
    PaymentMethodRequest,
    SubscriptionRequest,
    TransactionRequest,
)

__version__ = "0.1.0"

__all__ = [
    # Gateway implementations
    "Gateway",
    "BraintreeGateway",
    # Request and configuration types
    "GatewayConfig",
    "TransactionRequest",
    "CloneTransactionRequest",
    "PaymentMethodRequest",
    "SubscriptionRequest",
    # Exceptions
    "BraintreeAsyncError",
    "ConfigurationError",
    "ValidationError",
    "is_not_found",
]
