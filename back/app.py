#####################################################
#                                                   #
#                앱 상태 정의 및 관리                  #
#                                                   #
#####################################################

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
from logs.logging_util import LoggerSingleton
from contextlib import asynccontextmanager
from config.clients import initialize_clients
from config.exception import register_exception_handlers
from database import init_db
from auth.router import router as auth_router
from appointment.router import router as appointment_router
from counselor.router import router as counselor_router
from notification.router import router as notification_router
import os

# 로거 설정
logger = LoggerSingleton.get_logger(logger_name="app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"\n{'=' * 80}\n"
        f"| {' ' * 27} 📅 BOOKING SERVICE START 📅 {' ' * 27} |\n"
        f"{'=' * 80}\n"
    )

    if os.getenv("DB_AUTO_CREATE", "true").lower() == "true":
        init_db()
        logger.info("Database tables ensured")

    # 앱 상태에 클라이언트 컨테이너 저장
    app.state.client_container = initialize_clients()

    yield
    # 종료시 클린업 작업은 여기서
    logger.info(
        f"\n{'=' * 80}\n"
        f"| {' ' * 27} 🛑 BOOKING SERVICE STOP 🛑 {' ' * 28} |\n"
        f"{'=' * 80}\n"
    )

# FastAPI 앱 인스턴스 생성
app = FastAPI(title="Counseling Booking API", lifespan=lifespan)

# 전역 예외 핸들러
register_exception_handlers(app)

# Prometheus FastAPI 미들웨어 설정
Instrumentator().instrument(app).expose(app)

# 라우터 등록
routers = [auth_router, appointment_router, counselor_router, notification_router]

for router in routers:
    app.include_router(router)
