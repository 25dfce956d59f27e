# orderdesk/routers/customers.py
import httpx
from fastapi import APIRouter, Depends

from orderdesk.core.auth import require_permission
from orderdesk.core.config import get_settings
from orderdesk.core.erp_client import get_erp_client
from orderdesk.repositories.customer_repo import CustomerRepository
from orderdesk.schemas.customer import CustomerCreditRead
from orderdesk.services.customer_service import CustomerService

settings = get_settings()

router = APIRouter(prefix="/customers", tags=["Customers"])

repo = CustomerRepository()
service = CustomerService(repo, warning_percent=settings.DEBT_WARNING_PERCENT)


@router.get(
    "/{customer_id}/credit",
    response_model=CustomerCreditRead,
    dependencies=[
        Depends(require_permission("view_customers", "create_sales_order", any_of=True))
    ],
)
def get_customer_credit(
    customer_id: int,
    client: httpx.Client = Depends(get_erp_client),
):
    """
    Credit limit, current debt, available credit and debt status of a customer.

    Auth:
      - 'view_customers' or 'create_sales_order'
    """
    return service.get_credit(client, customer_id)
