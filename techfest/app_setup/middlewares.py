from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from techfest.config import CORS_ORIGINS

"""
Middlewares transverses de l’application (API JSON consommée par le front).
- register_basic_middlewares: CORS (FRONTEND_URL + CORS_ORIGINS).
- register_security_middleware: en-têtes de sécurité.
- register_no_cache_middleware: pas de cache sur les réponses d'inscription, de paiement et admin.
"""
NO_CACHE_PREFIXES = ("/api/admin", "/api/registration", "/api/payment")

def register_basic_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_protected(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(NO_CACHE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
        return response
