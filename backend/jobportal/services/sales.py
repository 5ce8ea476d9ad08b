from __future__ import annotations

from uuid import UUID

from sqlmodel import Session

from jobportal.models.contact import Contact
from jobportal.models.sales import Contract, Invoice, Quote
from jobportal.schemas.sales import ContractCreate, InvoiceCreate, QuoteCreate
from jobportal.services.errors import NotFoundError


class SalesService:
    """Quotes, contracts and invoices: the chain that ties a job to its contact."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_quote(self, payload: QuoteCreate) -> Quote:
        if not self.session.get(Contact, payload.contact_id):
            raise NotFoundError("Contact not found")
        quote = Quote(**payload.model_dump())
        return self._save(quote)

    def create_contract(self, payload: ContractCreate) -> Contract:
        if not self.session.get(Quote, payload.quote_id):
            raise NotFoundError("Quote not found")
        contract = Contract(**payload.model_dump())
        return self._save(contract)

    def create_invoice(self, payload: InvoiceCreate) -> Invoice:
        if not self.session.get(Contract, payload.contract_id):
            raise NotFoundError("Contract not found")
        invoice = Invoice(**payload.model_dump())
        return self._save(invoice)

    def get_quote(self, quote_id: UUID) -> Quote:
        quote = self.session.get(Quote, quote_id)
        if not quote:
            raise NotFoundError("Quote not found")
        return quote

    def get_contract(self, contract_id: UUID) -> Contract:
        contract = self.session.get(Contract, contract_id)
        if not contract:
            raise NotFoundError("Contract not found")
        return contract

    def _save(self, instance):
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance
