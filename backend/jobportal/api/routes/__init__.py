from . import auth, contacts, health, jobs, live, portal, sales

__all__ = [
    "auth",
    "contacts",
    "health",
    "jobs",
    "live",
    "portal",
    "sales",
]
