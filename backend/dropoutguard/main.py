import logging

from fastapi import FastAPI

from .db import init_db
from .settings import settings
from .routers import plans, students

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="DropoutGuard API")
app.include_router(students.router)
app.include_router(plans.router)


@app.get("/health")
def health():
	return {"status": "ok"}


@app.get("/info")
def info():
	return {"status": "ok", "gemini_configured": settings.gemini_configured}


@app.on_event("startup")
async def startup_event():
	init_db()
	logger.info("DropoutGuard API started (gemini configured: %s)", settings.gemini_configured)
