"""
Registre central des routers.
- Catalogue (public): events, workshops, passes
- API: payment, registration
- Admin: admin_router
- Health: health_router
"""
from fastapi import FastAPI
from techfest.catalog.views import events_router, workshops_router, passes_router
from techfest.payments import views as payments_views
from techfest.registrations import views as registrations_views
from techfest.admin.views import router as admin_router
from techfest.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # Catalogue
    app.include_router(events_router)
    app.include_router(workshops_router)
    app.include_router(passes_router)
    # Inscription et paiement
    app.include_router(payments_views.router)
    app.include_router(registrations_views.router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
