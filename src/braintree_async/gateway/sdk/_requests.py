from collections.abc import Mapping
from typing import Any, TypeVar

import braintree
import pydantic
from pydantic.alias_generators import to_snake

from braintree_async.exceptions import ConfigurationError, ValidationError
from braintree_async.types import (
    Amount,
    CloneTransactionRequest,
    GatewayConfig,
    Model,
    PaymentMethodRequest,
    SubscriptionRequest,
    TransactionRequest,
)

ModelT = TypeVar("ModelT", bound=Model)


def _convert_environment_to_sdk(
    environment: "str | braintree.Environment",
) -> braintree.Environment:
    """Convert an environment name to the SDK Environment constant.

    Names are case-insensitive and normalized to the SDK's capitalization,
    so ``sandbox`` and ``SANDBOX`` both resolve to ``Environment.Sandbox``.
    """
    if isinstance(environment, braintree.Environment):
        return environment
    name = environment.strip().capitalize()
    resolved = getattr(braintree.Environment, name, None)
    if not isinstance(resolved, braintree.Environment):
        raise ConfigurationError(f"Unknown Braintree environment: {environment!r}")
    return resolved


def _convert_config_to_sdk(config: GatewayConfig) -> braintree.Configuration:
    """Convert a validated GatewayConfig to an SDK Configuration."""
    assert config.environment is not None
    return braintree.Configuration(
        environment=_convert_environment_to_sdk(config.environment),
        merchant_id=config.merchant_id,
        public_key=config.public_key,
        private_key=config.private_key,
    )


def _validate_request(model: type[ModelT], values: Mapping[str, Any]) -> ModelT:
    """Validate request values, reporting failures as a ValidationError.

    The error's ``field`` is the snake_case name of the first offending field.
    """
    try:
        return model.model_validate(values)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        loc = error.get("loc") or (model.__name__,)
        raise ValidationError(
            to_snake(str(loc[0])), f"{model.__name__}: {error['msg']}"
        ) from e


def _build_transaction_request(
    amount: Amount,
    *,
    payment_method_nonce: str | None,
    payment_method_token: str | None,
    options: Mapping[str, Any] | None,
    fields: Mapping[str, Any],
) -> dict[str, Any]:
    """Build ``transaction.sale`` params; ``options`` is attached only when given."""
    request = _validate_request(
        TransactionRequest,
        {
            **fields,
            "amount": amount,
            "payment_method_nonce": payment_method_nonce,
            "payment_method_token": payment_method_token,
            "options": options or None,
        },
    )
    return request.to_params()


def _build_clone_request(amount: Amount, submit_for_settlement: Any) -> dict[str, Any]:
    """Build ``transaction.clone_transaction`` params.

    Settlement is submitted unless ``submit_for_settlement`` is exactly False.
    """
    request = _validate_request(
        CloneTransactionRequest,
        {
            "amount": amount,
            "options": {"submit_for_settlement": submit_for_settlement is not False},
        },
    )
    return request.to_params()


def _build_payment_method_request(
    customer_id: str, payment_method_nonce: str, fields: Mapping[str, Any]
) -> dict[str, Any]:
    request = _validate_request(
        PaymentMethodRequest,
        {
            **fields,
            "customer_id": customer_id,
            "payment_method_nonce": payment_method_nonce,
        },
    )
    return request.to_params()


def _build_subscription_request(
    plan_id: str, payment_method_token: str, fields: Mapping[str, Any]
) -> dict[str, Any]:
    request = _validate_request(
        SubscriptionRequest,
        {
            **fields,
            "plan_id": plan_id,
            "payment_method_token": payment_method_token,
        },
    )
    return request.to_params()
