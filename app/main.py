from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import PortalError, UnknownPrincipal
from app.api import bookings, doctors, payments, services, users
from app.core.logger import setup_logging, logger
from app.services.db_service import RecordStore
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Doctors Portal Backend")
    try:
        app.state.store = await RecordStore.connect(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.critical(f"❌ Cannot start without the record store: {e}")
        raise
    yield
    # Shutdown
    await app.state.store.close()
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(UnknownPrincipal)
async def unknown_principal_handler(request: Request, exc: UnknownPrincipal):
    return JSONResponse(status_code=exc.status_code, content={"accessToken": ""})

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {exc}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(services.router, tags=["Services"])
app.include_router(bookings.router, tags=["Bookings"])
app.include_router(users.router, tags=["Users"])
app.include_router(doctors.router, tags=["Doctors"])
app.include_router(payments.router, tags=["Payments"])

@app.get("/")
async def health_check():
    return {'status': 'Doctors portal server running', 'time': datetime.now().isoformat()}

@app.get("/health")
async def health_check_std():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
