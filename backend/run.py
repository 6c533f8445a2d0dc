"""Run script with proper environment loading"""
import os
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent
BASE_DIR = BACKEND_DIR.parent
sys.path.insert(0, str(BACKEND_DIR))

from dotenv import load_dotenv

env_file = BASE_DIR / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)

os.chdir(BACKEND_DIR)

if __name__ == "__main__":
    import uvicorn

    from webcalc.core.config import get_settings
    from webcalc.main import app

    settings = get_settings()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )
