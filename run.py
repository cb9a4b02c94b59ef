import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Single worker: the rate limiter keeps its counters in process memory.
    workers = int(os.environ.get("WEB_CONCURRENCY", 1))
    uvicorn.run(
        "cranksmith.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
    )
