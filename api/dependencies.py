# api/dependencies.py

from fastapi import HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import Settings, get_settings
from data.song_store import SongStore

# =========================
# Rate limiting
# Enabled/disabled from settings in main.py
# =========================

limiter = Limiter(key_func=get_remote_address)


def mutation_rate_limit() -> str:
    return f"{get_settings().rate_limit_per_minute}/minute"


# =========================
# Injected collaborators
# =========================

def get_app_settings() -> Settings:
    return get_settings()


def get_song_store(request: Request) -> SongStore:
    """Store created by the app lifespan. Tests override this dependency."""
    store = getattr(request.app.state, "song_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Song store not initialized")
    return store
