"""
Local server entry point
Sobe a API com uvicorn usando as configurações do .env
"""

import uvicorn

from impostor.core.config import settings


def server_options() -> dict:
    options = {
        "host": settings.HOST,
        "port": settings.PORT,
        "log_level": settings.LOG_LEVEL.lower(),
    }
    # uvicorn refuses reload together with several workers
    if settings.DEBUG:
        options["reload"] = True
        options["reload_dirs"] = ["impostor"]
    else:
        options["workers"] = settings.WORKERS
    return options


if __name__ == "__main__":
    uvicorn.run("impostor.main:app", **server_options())
