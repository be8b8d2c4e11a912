# upsc_prep/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import config
from .core.database import get_db_manager, close_db_manager
from .core.ai_services import get_ai_service, close_ai_service
from .core.errors import register_exception_handlers
from .api.routes import router

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("🚀 UPSC Prep API starting...")

    try:
        validation = config.validate()
        if not validation["valid"]:
            raise Exception(f"Configuration invalid: {validation['issues']}")
        for warning in validation["warnings"]:
            logger.warning(f"⚠️ {warning}")
        logger.info("✅ Configuration validated")

        logger.info("🔄 Initializing database...")
        db_manager = get_db_manager()
        db_health = db_manager.validate_connection()
        if not db_health["overall"]:
            raise Exception(f"Database validation failed: {db_health}")

        if config.AUTO_CREATE_TABLES:
            db_manager.create_tables()
        logger.info(f"✅ Database connected ({db_health['dialect']})")

        if config.SEED_SAMPLE_DATA:
            from .services.content_seed import seed_daily_content
            with db_manager.session_scope() as session:
                seed_daily_content(session)

        ai_health = get_ai_service().health_check()
        if ai_health["status"] != "healthy":
            logger.warning(f"AI service health warning: {ai_health}")
        logger.info(f"✅ AI service ready ({ai_health.get('mode', 'unknown')} mode)")

        logger.info(f"🌐 Environment: {config.ENVIRONMENT}")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise Exception(f"Application startup failed: {e}")

    yield

    logger.info("👋 Shutting down...")
    try:
        close_ai_service()
        close_db_manager()
        logger.info("✅ Graceful shutdown completed")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")


# Create FastAPI application
app = FastAPI(
    title=config.API_TITLE,
    description=config.API_DESCRIPTION,
    version=config.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    logger.info("🚀 Starting UPSC Prep API")
    logger.info(f"🌐 Server: http://{config.HOST}:{config.PORT}")
    logger.info(f"📚 Docs: http://{config.HOST}:{config.PORT}/docs")

    uvicorn.run(
        "upsc_prep.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.IS_DEVELOPMENT,
        log_level=config.LOG_LEVEL.lower(),
        access_log=config.IS_DEVELOPMENT
    )
