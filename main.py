import os

from dotenv import load_dotenv

# Load .env before the settings module is imported by the app
load_dotenv()

from fastapi.openapi.utils import get_openapi  # noqa: E402
from shipping.core.config import settings  # noqa: E402
from shipping.main import app  # noqa: E402


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="Shipping Service API",
        version="1.0.0",
        description=("Shipping cost quotes for carts and tracking ids for shipped orders."),
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    workers = int(os.getenv("UVICORN_WORKERS", "1"))
    keepalive = int(os.getenv("UVICORN_KEEPALIVE", "65"))
    uvicorn.run(
        "shipping.main:app",
        host="0.0.0.0",
        port=settings.SHIPPING_PORT,
        workers=workers,
        timeout_keep_alive=keepalive,
    )
