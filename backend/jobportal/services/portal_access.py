"""Resolves what a portal visitor may see.

Token access is all-or-nothing: the token names one job and every link of the
job -> contract -> quote -> contact chain must resolve. Session access lists
every job reachable from the visitor's contact and silently omits chains that
do not resolve.
"""

from __future__ import annotations

from uuid import UUID

from sqlmodel import Session, select

from jobportal.core.logging_setup import logger
from jobportal.models.contact import Contact
from jobportal.models.job import Job, JobFile
from jobportal.models.sales import Contract, ContractStatus, Invoice, Quote, QuoteStatus
from jobportal.schemas.contact import ContactRead
from jobportal.schemas.job import JobFileRead, JobRead
from jobportal.schemas.portal import (
    PortalDecision,
    PortalDecisionRead,
    PortalDocumentType,
    PortalIdentity,
    PortalView,
)
from jobportal.schemas.sales import ContractRead, InvoiceRead, QuoteRead
from jobportal.services.errors import PortalAuthenticationError, PortalNotFoundError
from jobportal.services.portal_token import PortalTokenService

DECISION_STATUSES: dict[PortalDocumentType, dict[PortalDecision, str]] = {
    PortalDocumentType.QUOTE: {
        PortalDecision.APPROVE: QuoteStatus.ACCEPTED.value,
        PortalDecision.REJECT: QuoteStatus.DECLINED.value,
    },
    PortalDocumentType.CONTRACT: {
        PortalDecision.APPROVE: ContractStatus.APPROVED.value,
        PortalDecision.REJECT: ContractStatus.REJECTED.value,
    },
}


class PortalAccessGate:
    def __init__(self, session: Session, token_service: PortalTokenService | None = None) -> None:
        self.session = session
        self.token_service = token_service or PortalTokenService(session)

    def resolve_by_token(self, token: str) -> PortalView:
        job_id = self.token_service.resolve(token)
        job = self.session.get(Job, job_id)
        if job is None:
            raise PortalNotFoundError("Portal token not found or expired")
        contract = self.session.get(Contract, job.contract_id)
        quote = self.session.get(Quote, contract.quote_id) if contract else None
        contact = self.session.get(Contact, quote.contact_id) if quote else None
        if contract is None or quote is None or contact is None:
            logger.warning("Broken portal chain for job %s", job.id)
            raise PortalNotFoundError("Portal token not found or expired")
        return self._build_view(job, contract, quote, contact)

    def resolve_by_session(self, identity: PortalIdentity) -> list[PortalView]:
        contact = self._active_contact(identity)
        views: list[PortalView] = []
        quotes = self.session.exec(
            select(Quote).where(Quote.contact_id == contact.id).order_by(Quote.created_at)
        ).all()
        for quote in quotes:
            contracts = self.session.exec(
                select(Contract).where(Contract.quote_id == quote.id).order_by(Contract.created_at)
            ).all()
            for contract in contracts:
                jobs = self.session.exec(
                    select(Job).where(Job.contract_id == contract.id).order_by(Job.created_at)
                ).all()
                for job in jobs:
                    views.append(self._build_view(job, contract, quote, contact))
        return views

    def resolve_job_for_session(self, identity: PortalIdentity, job_id: UUID) -> PortalView:
        for view in self.resolve_by_session(identity):
            if view.job.id == job_id:
                return view
        raise PortalNotFoundError("Job not found")

    def session_can_view(self, identity: PortalIdentity, job_id: UUID) -> bool:
        try:
            self.resolve_job_for_session(identity, job_id)
        except (PortalNotFoundError, PortalAuthenticationError):
            return False
        return True

    def decide(
        self,
        token: str,
        document_type: PortalDocumentType,
        decision: PortalDecision,
    ) -> PortalDecisionRead:
        """Approve or reject the quote or contract behind a token's job."""
        view = self.resolve_by_token(token)
        status = DECISION_STATUSES[document_type][decision]
        if document_type is PortalDocumentType.QUOTE:
            document = self.session.get(Quote, view.quote.id)
        else:
            document = self.session.get(Contract, view.contract.id)
        document.status = status
        self.session.add(document)
        self.session.commit()
        self.session.refresh(document)
        return PortalDecisionRead(document_type=document_type, document_id=document.id, status=document.status)

    def _active_contact(self, identity: PortalIdentity) -> Contact:
        contact = self.session.get(Contact, identity.contact_id)
        if contact is None or not contact.portal_enabled:
            raise PortalAuthenticationError("Not authenticated")
        return contact

    def _build_view(self, job: Job, contract: Contract, quote: Quote, contact: Contact) -> PortalView:
        files = self.session.exec(
            select(JobFile).where(JobFile.job_id == job.id).order_by(JobFile.created_at)
        ).all()
        invoices = self.session.exec(
            select(Invoice).where(Invoice.contract_id == contract.id).order_by(Invoice.created_at)
        ).all()
        return PortalView(
            job=JobRead.model_validate(job, from_attributes=True),
            contract=ContractRead.model_validate(contract, from_attributes=True),
            quote=QuoteRead.model_validate(quote, from_attributes=True),
            contact=ContactRead.model_validate(contact, from_attributes=True),
            files=[JobFileRead.model_validate(item, from_attributes=True) for item in files],
            invoices=[InvoiceRead.model_validate(item, from_attributes=True) for item in invoices],
        )
