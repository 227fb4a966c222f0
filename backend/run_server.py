#!/usr/bin/env python3
"""
Start the GymTrack API: apply migrations, then serve with uvicorn.
"""
import os
import sys
from pathlib import Path

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)


def run_migrations():
    from alembic.config import Config
    from alembic import command
    alembic_ini = backend_dir / "alembic.ini"
    print("Running database migrations...")
    cfg = Config(str(alembic_ini))
    command.upgrade(cfg, "head")
    print("Migrations complete.")


if __name__ == "__main__":
    import uvicorn
    from gymtrack.core.config import settings

    run_migrations()

    try:
        uvicorn.run(
            "gymtrack.main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level="info",
            access_log=True,
            reload=False,
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
