import uvicorn

from projecthub.config import settings


def main() -> None:
    uvicorn.run("projecthub.main:app", host="0.0.0.0", port=settings.port, reload=not settings.is_production)


if __name__ == "__main__":
    main()
