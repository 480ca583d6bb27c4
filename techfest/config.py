# techfest.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

"""
Configuration centrale du backend Tech Fiesta.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les chemins utiles (TEMPLATES_DIR pour les emails)
- Normalise et expose les secrets/URLs (Supabase, Stripe, comptes SMTP), CORS
- Les valeurs absentes ne font jamais planter l'import: les sous-systèmes
  concernés se dégradent (paiement non configuré, auth désactivée, email ignoré)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _split_env(name: str, default: str = "") -> list:
    return [x.strip() for x in os.getenv(name, default).split(",") if x.strip()]

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Supabase: URL et clés (anon pour l'auth, service pour les écritures)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clé publique renvoyée au front, clé secrète, secret webhook
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
# Secret HMAC des preuves de paiement (orderId|paymentId); défaut: clé secrète Stripe
PAYMENT_SIGNATURE_SECRET = _clean_env(os.getenv("PAYMENT_SIGNATURE_SECRET") or "") or STRIPE_SECRET_KEY
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "INR").upper()

# Tarif réduit: domaines email de l'établissement organisateur
DISCOUNT_EMAIL_DOMAINS = [d.lower().lstrip("@") for d in _split_env("DISCOUNT_EMAIL_DOMAINS", "citchennai.net")]

# Comptes d'envoi (jusqu'à 5) et SMTP
EMAIL_SENDER_NAME = _clean_env(os.getenv("EMAIL_SENDER_NAME") or "Tech Fiesta Team")
EMAIL_DAILY_LIMIT = _int_env("EMAIL_DAILY_LIMIT", 500)
EMAIL_RESET_HOUR = _int_env("EMAIL_RESET_HOUR", 0)
SMTP_HOST = _clean_env(os.getenv("SMTP_HOST") or "smtp.gmail.com")
SMTP_PORT = _int_env("SMTP_PORT", 465)
SUPPORT_EMAIL = _clean_env(os.getenv("SUPPORT_EMAIL") or "techfiesta@citchennai.net")
EMAIL_ACCOUNTS = [
    (
        _clean_env(os.getenv(f"EMAIL_{i}") or ""),
        _clean_env(os.getenv(f"EMAIL_{i}_PASSWORD") or ""),
    )
    for i in range(1, 6)
]

# Front, CORS, admin
FRONTEND_URL = _clean_env(os.getenv("FRONTEND_URL") or "http://localhost:3000").rstrip("/")
CORS_ORIGINS = [FRONTEND_URL] + [o for o in _split_env("CORS_ORIGINS") if o != FRONTEND_URL]
ADMIN_EMAILS = [e.lower() for e in _split_env("ADMIN_EMAILS")]

REGISTRATION_ID_PREFIX = "TF2025"
