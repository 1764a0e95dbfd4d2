"""Service names and resolution of the configuration-centre location."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

AUTH_SERVICE_V1 = "ecommerce-auth-v1"
USER_SERVICE_V1 = "ecommerce-user-v1"
PRODUCT_SERVICE_V1 = "ecommerce-product-v1"
CATEGORY_SERVICE_V1 = "ecommerce-category-v1"
PAYMENT_SERVICE_V1 = "ecommerce-payment-v1"
CART_SERVICE_V1 = "ecommerce-cart-v1"
CHECKOUT_SERVICE_V1 = "ecommerce-checkout-v1"
ORDER_SERVICE_V1 = "ecommerce-order-v1"
ASSISTANT_SERVICE_V1 = "ecommerce-assistant-v1"

DEFAULT_CONFIG_CENTER = "localhost:8500"
DEFAULT_CONFIG_PATH = "ecommerce/product/dev.yaml"

ENV_CONFIG_CENTER = "config_center"
ENV_CONFIG_PATH = "config_path"


@dataclass(frozen=True)
class ConfigCenter:
    """Address of the configuration centre and the path of a service's config."""

    addr: str = DEFAULT_CONFIG_CENTER
    path: str = DEFAULT_CONFIG_PATH


def resolve_config_center(
    config: ConfigCenter, environ: Mapping[str, str] | None = None
) -> ConfigCenter:
    """Return ``config`` with non-empty environment variables taking precedence."""
    env = os.environ if environ is None else environ
    addr = env.get(ENV_CONFIG_CENTER) or config.addr
    path = env.get(ENV_CONFIG_PATH) or config.path
    return replace(config, addr=addr, path=path)