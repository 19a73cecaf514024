"""
Product catalog gateway.

GET {base_url}/products/{product_id}, with the id percent-encoded as a single path
segment: 200 carries a ProductDetails body for that same id, 404 means the product
does not exist, anything else is a catalog fault. The gateway never retries; a
single call either answers or raises.
"""

from typing import Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import ValidationError

from orders_service.handlers.utils.errors import CatalogContractError, CatalogUnavailableError
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.catalog import ProductDetails


@runtime_checkable
class CatalogGateway(Protocol):
    """Read-only lookup of product details."""

    def get_product(self, product_id: str) -> Optional[ProductDetails]:
        """Return the product snapshot, or None when the catalog does not know the product."""
        ...


class HttpCatalogGateway:
    """Catalog gateway backed by the Product Catalog HTTP API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the catalog gateway.

        Args:
            base_url: Root URL of the Product Catalog API
            timeout_seconds: Upper bound for connect and read on each call
            client: Pre-built httpx client, mainly for tests
        """
        self.base_url = base_url.rstrip('/')
        self.client = client or httpx.Client(base_url=self.base_url, timeout=timeout_seconds)

    @tracer.capture_method
    def get_product(self, product_id: str) -> Optional[ProductDetails]:
        """
        Fetch a product from the catalog.

        Args:
            product_id: Catalog product identifier

        Returns:
            ProductDetails when found, None on 404

        Raises:
            CatalogUnavailableError: Transport failure or unexpected status
            CatalogContractError: Body does not match the ProductDetails contract
        """
        try:
            response = self.client.get(f'/products/{quote(product_id, safe="")}')
        except httpx.HTTPError as exc:
            metrics.add_metric(name='CatalogUnavailable', unit=MetricUnit.Count, value=1)
            logger.error('Catalog request failed', extra={'product_id': product_id, 'error': str(exc)})
            raise CatalogUnavailableError(
                message=f"Catalog request for '{product_id}' failed: {exc}",
                product_id=product_id,
            ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info('Product not found in catalog', extra={'product_id': product_id})
            return None

        if response.status_code != httpx.codes.OK:
            metrics.add_metric(name='CatalogUnavailable', unit=MetricUnit.Count, value=1)
            logger.error('Catalog returned unexpected status', extra={
                'product_id': product_id,
                'status_code': response.status_code,
            })
            raise CatalogUnavailableError(
                message=f"Catalog returned {response.status_code} for '{product_id}'",
                product_id=product_id,
                status_code=response.status_code,
            )

        try:
            product = ProductDetails.model_validate_json(response.content)
        except ValidationError as exc:
            metrics.add_metric(name='CatalogContractViolation', unit=MetricUnit.Count, value=1)
            logger.error('Catalog response violates contract', extra={
                'product_id': product_id,
                'validation_errors': exc.errors(include_url=False, include_input=False),
            })
            raise CatalogContractError(
                message=f"Catalog response for '{product_id}' does not match the product contract",
                product_id=product_id,
            ) from exc

        if product.product_id != product_id:
            metrics.add_metric(name='CatalogContractViolation', unit=MetricUnit.Count, value=1)
            logger.error('Catalog answered for a different product', extra={
                'product_id': product_id,
                'returned_product_id': product.product_id,
            })
            raise CatalogContractError(
                message=f"Catalog answered '{product.product_id}' when asked for '{product_id}'",
                product_id=product_id,
            )

        return product

    def close(self) -> None:
        self.client.close()
