"""
/appointments API 테스트
"""
from helpers import auth_headers, refetch
from models.appointment import Appointment
from models.enums import AppointmentStatus, Role, ScheduleStatus
from models.notification import Notification
from models.schedule import CounselorSchedule


def book(api, user, counselor_id, schedule_id, note=None):
    body = {"counselorId": counselor_id, "scheduleId": schedule_id}
    if note is not None:
        body["userNote"] = note
    return api.post("/appointments", json=body, headers=auth_headers(user))


class TestBookingApi:
    def test_book_returns_appointment_and_evidence(self, api, db, counselor, client_user, make_schedule):
        schedule = make_schedule(counselor)

        response = book(api, client_user, counselor.id, schedule.id, "불면 상담 희망")

        assert response.status_code == 201
        body = response.json()
        assert body["appointment"]["status"] == "BOOKED"
        assert body["appointment"]["userNote"] == "불면 상담 희망"
        assert body["appointment"]["schedule"]["status"] == "BOOKED"
        assert body["evidence"]["targetType"] == "APPOINTMENT"
        assert body["evidence"]["targetId"] == body["appointment"]["id"]
        assert body["evidence"]["status"] == "PENDING"

        assert refetch(db, CounselorSchedule, schedule.id).status == ScheduleStatus.BOOKED
        notifications = db.query(Notification).filter(Notification.user_id == counselor.id).all()
        assert len(notifications) == 1
        assert notifications[0].link == f"/counselor/appointments/{body['appointment']['id']}"

    def test_second_booking_conflicts(self, api, counselor, make_user, make_schedule):
        schedule = make_schedule(counselor)
        assert book(api, make_user(), counselor.id, schedule.id).status_code == 201

        response = book(api, make_user(), counselor.id, schedule.id)

        assert response.status_code == 409
        assert response.json()["success"] is False
        assert response.json()["code"] == "CONFLICT"

    def test_mismatched_counselor_is_bad_request(self, api, make_user, client_user, make_schedule):
        owner = make_user(Role.COUNSELOR)
        other = make_user(Role.COUNSELOR)
        schedule = make_schedule(owner)

        response = book(api, client_user, other.id, schedule.id)

        assert response.status_code == 400
        assert response.json()["code"] == "MISMATCH"

    def test_missing_schedule_is_not_found(self, api, counselor, client_user):
        response = book(api, client_user, counselor.id, 12345)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_counselor_cannot_book(self, api, counselor, make_schedule):
        schedule = make_schedule(counselor)

        response = book(api, counselor, counselor.id, schedule.id)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_note_longer_than_limit_is_rejected(self, api, counselor, client_user, make_schedule):
        schedule = make_schedule(counselor)

        response = book(api, client_user, counselor.id, schedule.id, "가" * 2001)

        assert response.status_code == 422
        assert response.json()["code"] == "REQUEST_VALIDATION_ERROR"

    def test_requires_authentication(self, api):
        response = api.post("/appointments", json={"counselorId": 1, "scheduleId": 1})

        assert response.status_code in (401, 403)


class TestAppointmentLifecycleApi:
    def test_user_cancel_then_rebook(self, api, db, counselor, make_user, make_schedule):
        first, second = make_user(), make_user()
        schedule = make_schedule(counselor)
        appointment_id = book(api, first, counselor.id, schedule.id).json()["appointment"]["id"]

        response = api.post(
            f"/appointments/{appointment_id}/cancel",
            json={"reason": "일정이 생겼어요"},
            headers=auth_headers(first),
        )

        assert response.status_code == 200
        assert response.json()["appointment"]["status"] == "CANCELLED_BY_USER"
        assert response.json()["appointment"]["cancelReason"] == "일정이 생겼어요"
        assert refetch(db, CounselorSchedule, schedule.id).status == ScheduleStatus.AVAILABLE
        assert book(api, second, counselor.id, schedule.id).status_code == 201

    def test_cancel_without_body(self, api, counselor, client_user, make_schedule):
        appointment_id = book(api, client_user, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]

        response = api.post(f"/appointments/{appointment_id}/cancel", headers=auth_headers(client_user))

        assert response.status_code == 200
        assert response.json()["appointment"]["cancelReason"] is None

    def test_counselor_cancel_closes_schedule(self, api, db, counselor, client_user, make_schedule):
        schedule = make_schedule(counselor)
        appointment_id = book(api, client_user, counselor.id, schedule.id).json()["appointment"]["id"]

        response = api.post(
            f"/appointments/{appointment_id}/cancel",
            json={"reason": "건강 문제"},
            headers=auth_headers(counselor),
        )

        assert response.status_code == 200
        assert response.json()["appointment"]["status"] == "CANCELLED_BY_COUNSELOR"
        assert refetch(db, CounselorSchedule, schedule.id).status == ScheduleStatus.CANCELLED
        assert db.query(Notification).filter(Notification.user_id == client_user.id).count() == 1

    def test_counselor_cancel_with_long_reason(self, api, db, counselor, client_user, make_schedule):
        schedule = make_schedule(counselor)
        appointment_id = book(api, client_user, counselor.id, schedule.id).json()["appointment"]["id"]
        reason = "x" * 300

        response = api.post(
            f"/appointments/{appointment_id}/cancel",
            json={"reason": reason},
            headers=auth_headers(counselor),
        )

        assert response.status_code == 200
        assert response.json()["appointment"]["cancelReason"] == reason
        assert refetch(db, CounselorSchedule, schedule.id).cancel_reason == reason

    def test_cancel_twice_is_invalid_state(self, api, counselor, client_user, make_schedule):
        appointment_id = book(api, client_user, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]
        api.post(f"/appointments/{appointment_id}/cancel", headers=auth_headers(client_user))

        response = api.post(f"/appointments/{appointment_id}/cancel", headers=auth_headers(client_user))

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_STATE"

    def test_complete_and_note(self, api, db, counselor, client_user, make_schedule):
        appointment_id = book(api, client_user, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]
        headers = auth_headers(counselor)

        note = api.patch(f"/appointments/{appointment_id}/note", json={"note": "사전 설문 확인"}, headers=headers)
        completed = api.post(f"/appointments/{appointment_id}/complete", headers=headers)
        again = api.post(f"/appointments/{appointment_id}/complete", headers=headers)

        assert note.status_code == 200
        assert note.json()["appointment"]["counselorNote"] == "사전 설문 확인"
        assert completed.status_code == 200
        assert completed.json()["appointment"]["status"] == "COMPLETED"
        assert completed.json()["appointment"]["completedAt"] is not None
        assert again.status_code == 409
        assert refetch(db, Appointment, appointment_id).status == AppointmentStatus.COMPLETED

    def test_user_cannot_complete(self, api, counselor, client_user, make_schedule):
        appointment_id = book(api, client_user, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]

        response = api.post(f"/appointments/{appointment_id}/complete", headers=auth_headers(client_user))

        assert response.status_code == 403


class TestAppointmentQueriesApi:
    def test_list_is_scoped_by_role(self, api, admin, counselor, make_user, make_schedule):
        owner, stranger = make_user(), make_user()
        appointment_id = book(api, owner, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]

        def ids(user):
            response = api.get("/appointments", headers=auth_headers(user))
            assert response.status_code == 200
            return [a["id"] for a in response.json()["appointments"]]

        assert ids(owner) == [appointment_id]
        assert ids(counselor) == [appointment_id]
        assert ids(admin) == [appointment_id]
        assert ids(stranger) == []

    def test_detail_and_evidence_visibility(self, api, counselor, make_user, make_schedule):
        owner, stranger = make_user(), make_user()
        appointment_id = book(api, owner, counselor.id, make_schedule(counselor).id).json()["appointment"]["id"]

        detail = api.get(f"/appointments/{appointment_id}", headers=auth_headers(owner))
        evidence = api.get(f"/appointments/{appointment_id}/evidence", headers=auth_headers(counselor))
        forbidden = api.get(f"/appointments/{appointment_id}", headers=auth_headers(stranger))
        missing = api.get("/appointments/9999", headers=auth_headers(owner))

        assert detail.status_code == 200
        assert detail.json()["appointment"]["id"] == appointment_id
        assert evidence.status_code == 200
        assert evidence.json()["evidence"]["summary"] == "상담 예약 신청"
        assert forbidden.status_code == 403
        assert missing.status_code == 404
