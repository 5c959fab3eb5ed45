from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.customer import CustomerIn, CustomerOut, CustomerPatch
from src.server.services.customer_service import CustomerService


router = APIRouter(prefix="/customers", tags=["customers"])

# SQLite INTEGER är 64 bitar – större id:n ger annars OverflowError i drivern
CustomerId = Annotated[int, Path(ge=1, le=2**63 - 1)]


def get_customer_service(session: Session = Depends(get_session)) -> CustomerService:
    return CustomerService(session)


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Customer not found")


# ==============================
# LISTA & HÄMTA
# ==============================

@router.get("", response_model=List[CustomerOut], summary="Lista alla kunder")
@router.get("/", response_model=List[CustomerOut], include_in_schema=False)
def get_all_customers(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    service: CustomerService = Depends(get_customer_service),
):
    return service.get_all_customers(skip=skip, limit=limit)


@router.get("/count", summary="Antal kunder")
def count_customers(service: CustomerService = Depends(get_customer_service)):
    return {"count": service.count_customers()}


@router.get("/{customer_id}", response_model=CustomerOut, summary="Hämta en kund")
def get_customer_by_id(
    customer_id: CustomerId,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.get_customer_by_id(customer_id)
    if customer is None:
        raise _not_found()
    return customer


# ==============================
# SKAPA, ÄNDRA, TA BORT
# ==============================

@router.post("", response_class=PlainTextResponse, summary="Lägg till kund")
@router.post("/", response_class=PlainTextResponse, include_in_schema=False)
def add_customer(
    payload: CustomerIn,
    service: CustomerService = Depends(get_customer_service),
):
    try:
        new_id = service.add_customer(payload)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Customer could not be saved")
    print(f"[customers] Skapade kund #{new_id}")
    return "Customer added successfully"


@router.put("/{customer_id}", response_model=CustomerOut, summary="Uppdatera kund")
def update_customer(
    customer_id: CustomerId,
    payload: CustomerPatch,
    service: CustomerService = Depends(get_customer_service),
):
    try:
        customer = service.update_customer(customer_id, payload)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Customer could not be saved")
    if customer is None:
        raise _not_found()
    return customer


@router.delete("/{customer_id}", response_class=PlainTextResponse, summary="Ta bort kund")
def delete_customer(
    customer_id: CustomerId,
    service: CustomerService = Depends(get_customer_service),
):
    if not service.delete_customer(customer_id):
        raise _not_found()
    print(f"[customers] Tog bort kund #{customer_id}")
    return "Customer deleted successfully"
