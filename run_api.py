"""Run the CF Quest API. Usage: python run_api.py"""
from pathlib import Path

# Load .env first so MONGODB_URI is available before settings are read.
_load_env = Path(__file__).resolve().parent / ".env"
if _load_env.exists():
    from dotenv import load_dotenv
    load_dotenv(_load_env)

import uvicorn

from api.main import app
from config import settings

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
