import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from opsdash.observability.logger import init_sentry
from opsdash.routes.booking import router as booking_router
from opsdash.routes.health import router as health_router
from opsdash.routes.meetings import router as meetings_router
from opsdash.routes.ui import router as ui_router
from opsdash.scheduler.service import get_refresher, start_refresher, stop_refresher
from opsdash.scheduling.session import get_session, set_session

logger = logging.getLogger("opsdash")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="opsdash (meeting scheduling)")


@app.on_event("startup")
async def _startup():
    init_sentry()
    start_refresher()


@app.on_event("shutdown")
async def _shutdown():
    stop_refresher()
    session = get_session()
    await session.aclose()
    set_session(None)
    logger.info("Scheduling session closed")


# Routes
app.include_router(health_router, tags=["health"])
app.include_router(booking_router, prefix="/booking", tags=["booking"])
app.include_router(meetings_router, prefix="/meetings", tags=["meetings"])
app.include_router(ui_router, prefix="/ui", tags=["ui"])


@app.get("/scheduler/status")
def scheduler_status():
    return JSONResponse(status_code=200, content=get_refresher().get_status())


@app.get("/")
def root():
    return {"status": "ok"}
