import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from magic_ball.crud import CreateData
from magic_ball.db import engine
from magic_ball.exceptions import StorageError, ValidationError
from magic_ball.load_secrets import frontend_url, server_port
from magic_ball.routers import prediction

logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app):
    """Create the tables if they do not exist.
    This function is called to start the server.
    """
    await CreateData.create_table(engine)
    try:
        yield
    finally:
        await engine.dispose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(prediction.prediction_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "initData is required"})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=500, content={"error": "Failed to generate prediction"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logging.error(f"Prediction error: {exc!r}")
    return JSONResponse(status_code=500, content={"error": "Failed to generate prediction"})


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=server_port)
