import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file before settings are read
load_dotenv()

from review_dashboard.core.config import is_development  # noqa: E402


if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", 8000))

    # Disable reload in production
    reload = is_development()

    # Single worker: rate limit counters and the in-memory store are per process
    uvicorn.run(
        "review_dashboard.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
        workers=1,
    )
