"""
Claryon Consulting Site API
Entry point for running the server with uvicorn
"""

import os
import uvicorn

from claryon.core.config import settings
from claryon.main import app  # noqa: F401

if __name__ == "__main__":
    is_dev = settings.ENVIRONMENT != "production"
    port = int(os.getenv("PORT", str(settings.port)))
    uvicorn.run(
        # Use import string so reload/workers work correctly
        "claryon.main:app",
        host=settings.host,
        port=port,
        reload=is_dev,
        log_level=settings.LOG_LEVEL.lower()
    )
