import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from homewatch.logging_config import setup_logging
from homewatch.routes.dashboard import router as dashboard_router
from homewatch.routes.readings import router as readings_router

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Homewatch", version="0.1.0")
logger.info("FastAPI app created")

app.include_router(readings_router)
app.include_router(dashboard_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    logger.info("Homewatch starting up")
    logger.info("API docs available at http://localhost:8000/docs")


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
