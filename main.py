import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.connections import mongo_lifespan
from app.api.handlers import register_exception_handlers
from app.api.user import router as user_router
from app.api.cart import router as cart_router
from app.api.voucher import router as voucher_router
from app.utils.config import settings


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


app = FastAPI(title="Bookshop API", version="0.1.0", lifespan=mongo_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    max_age=86400,
)

register_exception_handlers(app)


@app.get("/")
def read_root() -> dict:
    return {"success": True, "message": "Bookshop API is running"}


app.include_router(user_router, prefix="/api/users")
app.include_router(cart_router, prefix="/api/cart")
app.include_router(voucher_router, prefix="/api/vouchers")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
