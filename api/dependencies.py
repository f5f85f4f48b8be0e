"""
API依赖项 - 支付服务注入

Services are built once in the application lifespan and stored on
`app.state`; routes only look them up.
"""
from fastapi import HTTPException, Request, status

from application.services.payment_service import PaymentService


def get_payment_service(request: Request) -> PaymentService:
    service = getattr(request.app.state, "payment_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payment service not initialized",
        )
    return service
