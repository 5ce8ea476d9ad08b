# noqa: F401 to ensure models are imported for metadata
from jobportal.models.audit import AuditLog, AuthLog
from jobportal.models.contact import Contact
from jobportal.models.job import Job, JobFile, Message, Note
from jobportal.models.portal import PortalSessionRecord, PortalToken
from jobportal.models.sales import Contract, Invoice, Quote
from jobportal.models.user import User

__all__ = [
    "AuditLog",
    "AuthLog",
    "Contact",
    "Contract",
    "Invoice",
    "Job",
    "JobFile",
    "Message",
    "Note",
    "PortalSessionRecord",
    "PortalToken",
    "Quote",
    "User",
]
