"""
Forensic Replay – Django Settings (Infrastructure Only)
=========================================================
Django hosts the append-only audit store and the FORENSIC_REPLAY
configuration block. Replay logic does not depend on Django.
"""

from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = "forensic-replay-dev-key-replace-before-deployment"

DEBUG = True

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "forensics.audit_store",
]

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
# Record ids double as arrival order.
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Forensic Replay ──────────────────────────────────────────
FORENSIC_REPLAY = {
    "FRAME_CACHE_SIZE": 100,
    "TICK_INTERVAL_MS": 100,
    "STEP_MS": 60_000,
    "DEFAULT_SPEED": 1,
}
