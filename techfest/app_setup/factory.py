"""
Factory d’application pour les entrypoints (techfest.asgi, python -m techfest).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_no_cache_middleware, register_security_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - CORS, en-têtes de sécurité, no-cache
      - gestionnaires d’exceptions
      - tous les routers (catalogue, paiement, inscription, admin, health)
    """
    app = FastAPI(title="Tech Fiesta 2025 API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
