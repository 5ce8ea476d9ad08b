from jobportal.schemas import auth, contact, job, portal, sales

__all__ = [
    "auth",
    "contact",
    "job",
    "portal",
    "sales",
]
