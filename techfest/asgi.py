"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager importe `techfest.asgi:app`.
- Toute la configuration de FastAPI est centralisée dans techfest.app_setup.factory;
  ce fichier ne fait qu’exposer l’instance `app`.
"""

from techfest.app import app
