from fastapi import FastAPI

from regintel.web.routers.alerts import router as alerts_router
from regintel.web.routers.auth import router as auth_router
from regintel.web.routers.briefings import router as briefings_router
from regintel.web.routers.companies import router as companies_router
from regintel.web.routers.competitors import router as competitors_router
from regintel.web.routers.dashboard import router as dashboard_router
from regintel.web.routers.executives import router as executives_router
from regintel.web.routers.government_contacts import router as government_contacts_router
from regintel.web.routers.opportunities import router as opportunities_router
from regintel.web.routers.procurement import router as procurement_router
from regintel.web.routers.research import router as research_router


def register_routers(app: FastAPI):
    """Register all routers with the application."""
    app.include_router(companies_router)
    app.include_router(executives_router)
    app.include_router(opportunities_router)
    app.include_router(competitors_router)
    app.include_router(procurement_router)
    app.include_router(government_contacts_router)
    app.include_router(research_router)
    app.include_router(alerts_router)
    app.include_router(briefings_router)
    app.include_router(dashboard_router)
    app.include_router(auth_router)
