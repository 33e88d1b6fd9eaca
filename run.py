# run.py
import uvicorn
import sys
import os

# Add the current directory to the Python path
sys.path.insert(0, os.path.abspath("."))

from app.core.config import settings
from app.core.logging import logger, setup_logging

if __name__ == "__main__":
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} on port {settings.PORT}...")
    try:
        uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=not settings.is_production)
    except Exception as e:
        logger.error(f"Error starting server: {str(e)}")
        sys.exit(1)
