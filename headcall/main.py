# Role: FastAPI app bootstrap. Loads environment config early, registers routers, and exposes discoverability.

from fastapi import FastAPI

import headcall.config
headcall.config.load_env()

from headcall.api.function_call import router as function_call_router
from headcall.api.health import router as health_router

app = FastAPI(title="Parallel Head Function-Calling API", version="0.1.0")
app.include_router(function_call_router)
app.include_router(health_router)


@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "Function-calling API is running",
        "docs": "/docs",
        "health": "/health",
    }
