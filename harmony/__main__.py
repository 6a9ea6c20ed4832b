"""
Run the API server: python -m harmony
"""
import uvicorn

from harmony.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("harmony.main:app", host=settings.host, port=settings.port,
                reload=settings.debug, log_config=None)


if __name__ == "__main__":
    main()
