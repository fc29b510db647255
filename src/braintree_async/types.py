"""braintree-async request and configuration types."""

from decimal import Decimal
from typing import Any

import braintree
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Amount = Decimal | int | float | str


class Model(BaseModel):
    """Base model for all braintree-async types.

    Fields accept either their snake_case name or the camelCase alias used by
    the gateway's other client libraries (``merchantId``, ``paymentMethodNonce``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_params(self) -> dict[str, Any]:
        """Serialize to the snake_case parameter dict the Braintree SDK expects."""
        return self.model_dump(exclude_none=True)


class GatewayConfig(Model):
    """Credentials and environment for one gateway connection.

    Every field is optional here so that a partial record can be reported as a
    ConfigurationError naming the missing field, rather than a pydantic error.
    """

    environment: str | braintree.Environment | None = None
    """ Environment name, case-insensitive (``sandbox``, ``Production``).
    """
    merchant_id: str | None = None
    public_key: str | None = None
    private_key: str | None = None

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)


class TransactionOptions(Model):
    submit_for_settlement: bool | None = None
    store_in_vault: bool | None = None
    store_in_vault_on_success: bool | None = None

    model_config = ConfigDict(extra="allow")


class TransactionRequest(Model):
    """Parameters for ``transaction.sale``."""

    amount: Amount
    payment_method_nonce: str | None = None
    payment_method_token: str | None = None
    options: TransactionOptions | None = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class CloneOptions(Model):
    submit_for_settlement: bool = True


class CloneTransactionRequest(Model):
    """Parameters for ``transaction.clone_transaction``."""

    amount: Amount
    options: CloneOptions = Field(default_factory=CloneOptions)


class PaymentMethodRequest(Model):
    """Parameters for ``payment_method.create``."""

    customer_id: str
    payment_method_nonce: str

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class SubscriptionRequest(Model):
    """Parameters for ``subscription.create``."""

    plan_id: str
    payment_method_token: str

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)
