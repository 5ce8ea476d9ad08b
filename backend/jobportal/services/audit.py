from uuid import UUID

from sqlmodel import Session

from jobportal.models.audit import AuditLog, AuthLog


class AuditService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def record_auth(
        self,
        contact_id: UUID | None,
        event_type: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
        success: bool = True,
    ) -> None:
        log = AuthLog(
            contact_id=contact_id,
            event_type=event_type,
            ip_address=ip_address,
            user_agent=user_agent,
            success=success,
        )
        self.session.add(log)
        self.session.commit()

    def record_event(
        self,
        event_type: str,
        actor_id: UUID | None = None,
        actor_role: str | None = None,
        job_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        details: dict | None = None,
    ) -> None:
        log = AuditLog(
            job_id=job_id,
            event_type=event_type,
            actor_id=actor_id,
            actor_role=actor_role,
            ip_address=ip_address,
            user_agent=user_agent,
            details=details or {},
        )
        self.session.add(log)
        self.session.commit()
