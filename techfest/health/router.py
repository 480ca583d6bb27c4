from datetime import datetime, timezone
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from techfest.health import service as health_service
from techfest.payments import stripe_client
from techfest.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/api/health", tags=["Health"])

@router.get("")
def health_root():
    return {
        "message": "Tech Fiesta API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "payments": {"configured": stripe_client.is_configured()},
    }

@router.get("/supabase")
def health_supabase():
    return JSONResponse(health_service.health_supabase_info())

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)
