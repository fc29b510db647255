from braintree_async.gateway.sdk.gateway import BraintreeGateway

__all__ = ["BraintreeGateway"]
