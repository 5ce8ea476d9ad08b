from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from jobportal.api.deps import get_current_active_user, get_db
from jobportal.models.user import User
from jobportal.schemas.sales import (
    ContractCreate,
    ContractRead,
    InvoiceCreate,
    InvoiceRead,
    QuoteCreate,
    QuoteRead,
)
from jobportal.services.errors import NotFoundError
from jobportal.services.sales import SalesService

router = APIRouter(tags=["sales"])


@router.post("/quotes", response_model=QuoteRead, status_code=status.HTTP_201_CREATED)
def create_quote(
    payload: QuoteCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> QuoteRead:
    try:
        quote = SalesService(session).create_quote(payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return QuoteRead.model_validate(quote, from_attributes=True)


@router.get("/quotes/{quote_id}", response_model=QuoteRead)
def get_quote(
    quote_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> QuoteRead:
    try:
        quote = SalesService(session).get_quote(quote_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return QuoteRead.model_validate(quote, from_attributes=True)


@router.post("/contracts", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ContractRead:
    try:
        contract = SalesService(session).create_contract(payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ContractRead.model_validate(contract, from_attributes=True)


@router.get("/contracts/{contract_id}", response_model=ContractRead)
def get_contract(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ContractRead:
    try:
        contract = SalesService(session).get_contract(contract_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ContractRead.model_validate(contract, from_attributes=True)


@router.post("/invoices", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> InvoiceRead:
    try:
        invoice = SalesService(session).create_invoice(payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return InvoiceRead.model_validate(invoice, from_attributes=True)
