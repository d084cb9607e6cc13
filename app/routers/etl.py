"""
ETL API: create tables, seed sample ICU data.
"""
import logging
import os
import subprocess
import sys
from pathlib import Path

from fastapi import APIRouter, HTTPException

from app.config import settings
from app.database import init_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/etl", tags=["etl"])


@router.post("/init-db")
def run_init_db():
    """Create the ICU event tables if missing."""
    try:
        init_db()
    except Exception as e:
        logger.exception("Table creation failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "ok", "message": "Tables created."}


@router.post("/seed")
def seed():
    """Run seed_data.py to populate sample data."""
    seed_path = Path(__file__).resolve().parent.parent.parent / "database" / "seed_data.py"
    if not seed_path.exists():
        raise HTTPException(status_code=404, detail="database/seed_data.py not found")
    result = subprocess.run(
        [sys.executable, str(seed_path)],
        env={**os.environ, "DATABASE_URL": settings.database_url},
        capture_output=True,
        text=True,
        cwd=str(seed_path.parent),
    )
    if result.returncode != 0:
        logger.error("Seed failed: %s", result.stderr or result.stdout)
        raise HTTPException(status_code=500, detail=result.stderr or result.stdout)
    return {"status": "ok", "message": "Seed completed.", "stdout": result.stdout}
