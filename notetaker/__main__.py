"""Run the NoteTaker API with uvicorn: `python -m notetaker`."""

import uvicorn

from notetaker.config import settings


def main() -> None:
    uvicorn.run(
        "notetaker.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
