"""
ASGI Entry Point for TimelineMap API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It proactively loads environment variables from `.env` so that configuration is
available before the application factory runs.

Usage
-----
Run via the module entry point:
    $ python -m timelinemap.api.server

Or via uvicorn directly:
    $ uvicorn timelinemap.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env BEFORE building the application, so the
# cached settings see MONGO_URI, UPLOADS_DIR, GEOCODER_* and friends.
env_path = Path(".env")
load_dotenv(dotenv_path=env_path)

from timelinemap.api.app import create_app  # noqa: E402
from timelinemap.core.settings import load_settings  # noqa: E402

load_settings.cache_clear()

# Factory invocation
app = create_app(load_settings())


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()
    print(f"{'[ Config Check ]':=^60}")
    print(f"{'STORE_BACKEND':<24} : {cfg.store_backend}")
    print(f"{'UPLOADS_DIR':<24} : {cfg.uploads_dir}")
    print(f"{'FRONTEND_BUILD_DIR':<24} : {cfg.frontend_build_dir}")
    print(f"{'GEOCODER_BASE_URL':<24} : {cfg.geocoder_base_url}")
    print(f"{'GEOCODER_USER_AGENT':<24} : {cfg.geocoder_user_agent}")
    print(f"{'='*60}\n")

    uvicorn.run(
        "timelinemap.api.server:app",
        host=cfg.host,
        port=cfg.port,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
