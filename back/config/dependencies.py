#####################################################
#                                                   #
#                의존성 주입 함수 정의                 #
#                                                   #
#####################################################

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from appointment.service import BookingService
from appointment.unit_of_work import UnitOfWork
from database import get_db
from notification.dispatcher import SideEffectDispatcher

##### 클라이언트 의존성 주입 함수 정의 #####
# app.py lifespan 에서 초기화된 클라이언트를 반환
# Depends를 위한 헬퍼 함수

# 후속 처리 dispatcher
def get_dispatcher(request: Request) -> SideEffectDispatcher:
    return request.app.state.client_container.dispatcher

# 요청 세션을 감싼 예약 상태 머신
def get_booking_service(
    db: Session = Depends(get_db),
    dispatcher: SideEffectDispatcher = Depends(get_dispatcher),
) -> BookingService:
    return BookingService(UnitOfWork(db), dispatcher)
