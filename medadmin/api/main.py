from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medadmin import __version__
from medadmin.core.config import get_settings
from medadmin.core.logger import setup_logger
from medadmin.api.routers import providers, organizations, requirements, overrides

settings = get_settings()
setup_logger("medadmin")

app = FastAPI(
    title=settings.app_name,
    description="Admin approval workflow and account override sessions",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(providers.router, prefix="/api/admin")
app.include_router(organizations.router, prefix="/api/admin")
app.include_router(requirements.router, prefix="/api/admin")
app.include_router(overrides.router, prefix="/api/admin")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
