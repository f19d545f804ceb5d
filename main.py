import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config.settings import settings
from core.services.image_transformer import ImageProcessingError
from core.services.object_store import ObjectStoreError
from infrastructure.db.sqlite import init_db
from infrastructure.web.controllers.user_controller import router as user_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Phonebook users")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# локальные аватары, когда Supabase не настроен
Path(settings.PUBLIC_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=settings.PUBLIC_DIR), name="static")


@app.on_event("startup")
def on_startup():
    init_db(settings.DB_PATH)


@app.exception_handler(ImageProcessingError)
async def image_processing_error_handler(request: Request, exc: ImageProcessingError):
    logger.exception("Avatar transform failed on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Unable to process image"})


@app.exception_handler(ObjectStoreError)
async def object_store_error_handler(request: Request, exc: ObjectStoreError):
    logger.exception("Avatar upload failed on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=502, content={"detail": "Unable to store image"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


app.include_router(user_router)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
