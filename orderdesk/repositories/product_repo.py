# orderdesk/repositories/product_repo.py
import logging

import httpx
from pydantic import ValidationError

from orderdesk.schemas.common import unwrap_data
from orderdesk.schemas.product import ProductRef

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Read access to the ERP product catalog.

    - Pure HTTP calls + parsing, no FastAPI, no business logic.
    - Transport errors and non-404 HTTP errors propagate as httpx exceptions.
    """

    def get_by_id(self, client: httpx.Client, product_id: int) -> ProductRef | None:
        resp = client.get(f"/products/{product_id}")
        if resp.status_code == httpx.codes.NOT_FOUND:
            return None
        resp.raise_for_status()

        try:
            return ProductRef.model_validate(unwrap_data(resp.json()))
        except (ValidationError, ValueError):
            logger.warning(f"Unusable product payload for id={product_id}")
            return None
