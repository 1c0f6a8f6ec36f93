"""Run the API server: python -m type_editor"""

import uvicorn

from type_editor.config import settings


def main() -> None:
    uvicorn.run(
        "type_editor.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
