"""
FastAPI应用主入口
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routes import payments as payments_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from application.services.payment_service import PaymentService
from core.config import settings
from core.settings import payment_settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.external.payments import get_charge_gateway, get_webhook_verifier


# 初始化日志：在入口处显式配置
configure_logging()
logger = get_logger(__name__)


def build_payment_service() -> PaymentService:
    """Composition root for the payment core; credentials are checked once here."""
    tranzak = payment_settings.tranzak
    missing = tranzak.missing_credentials()
    if missing:
        logger.warning("tranzak_credentials_missing", missing=missing, message="Charges will be refused")
    if tranzak.missing_webhook_secret():
        logger.warning("tranzak_webhook_secret_missing", message="Webhooks will be rejected with 500")
    return PaymentService(
        gateway=get_charge_gateway("tranzak"),
        config=tranzak,
        public_base_url=settings.APP_PUBLIC_URL,
        webhook_verifier=get_webhook_verifier("tranzak"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    app.state.payment_service = build_payment_service()
    logger.info("payment_service_initialized", provider="tranzak")
    yield
    service = getattr(app.state, "payment_service", None)
    if service is not None:
        await service.aclose()
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Mobile-money charges and Tranzak webhook verification",
)

# 添加中间件（注意顺序：从下往上执行）
app.add_middleware(RequestIDMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(payments_routes.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    """API根路径"""
    return success_response(
        data={
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc"
        },
        message="Welcome",
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return success_response(data={"status": "healthy"}, message="OK")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
