# orderdesk/repositories/order_repo.py
import httpx

from orderdesk.schemas.common import unwrap_data
from orderdesk.schemas.order import SalesOrderCreate, SalesOrderRef


class SalesOrderRepository:
    """
    Write access to the ERP's sales orders.

    NOTE:
      - The ERP is the system of record; this call is the only place an
        order leaves this service.
      - Errors (HTTP or malformed response) propagate; the service maps them.
    """

    def create(self, client: httpx.Client, payload: SalesOrderCreate) -> SalesOrderRef:
        resp = client.post("/sales-orders", json=payload.to_request_json())
        resp.raise_for_status()
        return SalesOrderRef.model_validate(unwrap_data(resp.json()))
