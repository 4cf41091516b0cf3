import math

import uvicorn

from ip_verifier.config import get_settings
from ip_verifier.logger import log_config


def main() -> None:
    """Run the FastAPI application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "ip_verifier.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        timeout_keep_alive=max(1, math.ceil(settings.read_timeout)),
        timeout_graceful_shutdown=max(1, math.ceil(settings.shutdown_timeout)),
        log_config=log_config,
    )


if __name__ == "__main__":
    main()
