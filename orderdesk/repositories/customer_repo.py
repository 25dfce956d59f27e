# orderdesk/repositories/customer_repo.py
import logging

import httpx
from pydantic import ValidationError

from orderdesk.schemas.common import unwrap_data
from orderdesk.schemas.customer import CustomerRef

logger = logging.getLogger(__name__)


class CustomerRepository:
    """
    Read access to the ERP customer directory (credit snapshot only).
    """

    def get_by_id(self, client: httpx.Client, customer_id: int) -> CustomerRef | None:
        resp = client.get(f"/customers/{customer_id}")
        if resp.status_code == httpx.codes.NOT_FOUND:
            return None
        resp.raise_for_status()

        try:
            return CustomerRef.model_validate(unwrap_data(resp.json()))
        except (ValidationError, ValueError):
            logger.warning(f"Unusable customer payload for id={customer_id}")
            return None
