# main.py
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from config.cache import close_redis, get_redis
from config.logging import configure_logging
from config.settings import settings
from controller.controller_dependencies import get_session_service
from util.constants import InternalURIs
from util.errors import AppError

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    print(f"{Color.GREEN}Server Started{Color.RESET}")
    print(f"{Color.GREEN}Initializing...{Color.RESET}")

    try:
        # Warm Redis
        await get_redis()
    except Exception as e:
        print("Failed to connect to Redis:", e)
        raise

    service = get_session_service()
    resumed = await service.resume()
    if resumed:
        print(f"{Color.CYAN}Resumed job {resumed}{Color.RESET}")

    try:
        yield
    finally:
        try:
            await service.aclose()
        except Exception as e:
            print("Error closing session:", e)

        try:
            await close_redis()
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,  # Allow cookies and other credentials
    allow_methods=["GET", "POST", "PUT", "DELETE"],  # Allowed HTTP Methods
    allow_headers=["Content-Type", "Accept"],  # Allowed HTTP Headers
)


@app.exception_handler(AppError)
async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.__class__.__name__, "message": exc.message},
    )


@app.get(InternalURIs.HEALTHZ)
async def healthz():
    return {"ok": True}


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run(
        "main:app", host=settings.LOCAL_HOST, port=settings.LOCAL_PORT, reload=reload
    )
