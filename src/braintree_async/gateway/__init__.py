from braintree_async.gateway.abc import Gateway
from braintree_async.gateway.sdk import BraintreeGateway

__all__ = ["Gateway", "BraintreeGateway"]
