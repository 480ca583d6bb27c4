"""
Pool des comptes d'envoi email (jusqu'à 5, configurés par EMAIL_n / EMAIL_n_PASSWORD).

- Rotation round-robin; un compte au plafond journalier est sauté.
- Tous les comptes au plafond: retour au premier compte configuré (le fournisseur
  décidera).
- Compteurs remis à zéro par une tâche planifiée (run_daily_reset), démarrée par
  le lifespan de l'application.
L'objet est partagé entre requêtes et tâches de fond: toutes les mutations
passent par un verrou.
"""
import asyncio
import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from techfest import config

logger = logging.getLogger(__name__)

_MASK_RE = re.compile(r"^(.{1,3}).*(@.*)$")


def mask_email(email: str) -> str:
    """abcdef@host -> abc***@host"""
    return _MASK_RE.sub(r"\1***\2", email or "")


@dataclass
class EmailAccount:
    email: str
    password: str
    daily_limit: int = 500
    usage: int = 0

    @property
    def at_limit(self) -> bool:
        return self.usage >= self.daily_limit


class EmailAccountPool:
    def __init__(self, accounts: Iterable[EmailAccount], sender_name: str = "Tech Fiesta Team"):
        self.accounts: List[EmailAccount] = [a for a in accounts if a.email and a.password]
        self.sender_name = sender_name
        self._index = 0
        self._lock = threading.Lock()
        self.last_reset: Optional[datetime] = None

    @classmethod
    def from_config(cls) -> "EmailAccountPool":
        return cls.from_pairs(config.EMAIL_ACCOUNTS, daily_limit=config.EMAIL_DAILY_LIMIT)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]], daily_limit: int = 500) -> "EmailAccountPool":
        return cls(
            [EmailAccount(email, password, daily_limit) for email, password in pairs],
            sender_name=config.EMAIL_SENDER_NAME,
        )

    def __len__(self) -> int:
        return len(self.accounts)

    @property
    def configured(self) -> bool:
        return bool(self.accounts)

    def select(self) -> Optional[EmailAccount]:
        """Compte courant ou suivant sous le plafond; None si aucun compte configuré."""
        with self._lock:
            if not self.accounts:
                return None
            count = len(self.accounts)
            for offset in range(count):
                position = (self._index + offset) % count
                account = self.accounts[position]
                if not account.at_limit:
                    self._index = position
                    return account
            logger.warning("All email accounts have reached their daily limit")
            return self.accounts[0]

    def record_success(self, account: EmailAccount) -> int:
        """Incrémente l'usage du compte et avance au suivant pour le prochain envoi."""
        with self._lock:
            account.usage += 1
            if self.accounts:
                self._index = (self._index + 1) % len(self.accounts)
            return account.usage

    def advance(self) -> None:
        with self._lock:
            if self.accounts:
                self._index = (self._index + 1) % len(self.accounts)

    def reset_usage(self) -> None:
        with self._lock:
            for account in self.accounts:
                account.usage = 0
            self.last_reset = datetime.now()
        logger.info("Email usage counters reset (%d accounts)", len(self.accounts))

    def status(self) -> Dict[str, Any]:
        """État masqué pour l'admin (jamais de mot de passe)."""
        with self._lock:
            return {
                "configured": bool(self.accounts),
                "lastReset": self.last_reset.isoformat() if self.last_reset else None,
                "accounts": [
                    {
                        "index": i + 1,
                        "email": mask_email(a.email),
                        "currentUsage": a.usage,
                        "dailyLimit": a.daily_limit,
                        "isActive": i == self._index,
                    }
                    for i, a in enumerate(self.accounts)
                ],
            }


def seconds_until(hour: int, now: Optional[datetime] = None) -> float:
    """Secondes jusqu'à la prochaine occurrence de `hour`:00 (heure locale)."""
    now = now or datetime.now()
    target = now.replace(hour=hour % 24, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


async def run_daily_reset(pool: EmailAccountPool, hour: int = 0) -> None:
    """Boucle de remise à zéro quotidienne; se termine sur annulation (arrêt de l'app)."""
    while True:
        await asyncio.sleep(seconds_until(hour))
        pool.reset_usage()
