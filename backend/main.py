import uvicorn

from pocketbooks.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "pocketbooks.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
