from datetime import time, timedelta

from .conftest import FUTURE_DATE, make_appointment, make_schedule

doctor_data = {
    "first_name": "Meredith",
    "last_name": "Grey",
    "specialization": "General Surgery"
}

class TestDoctors:

    def test_list_doctors_is_public(self, client, doctor_id):
        """Test that anyone can list doctors."""
        response = client.get("/api/v1/doctors")
        assert response.status_code == 200

        data = response.json()
        assert [d["id"] for d in data] == [doctor_id]
        assert data[0]["last_name"] == "House"

    def test_get_doctor(self, client, doctor_id):
        response = client.get(f"/api/v1/doctors/{doctor_id}")
        assert response.status_code == 200
        assert response.json()["specialization"] == "Diagnostics"

    def test_get_unknown_doctor(self, client, test_db):
        """Test that a missing doctor returns 404 with the service message."""
        response = client.get("/api/v1/doctors/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Doctor not found"

    def test_create_doctor_as_admin(self, client, admin):
        response = client.post("/api/v1/doctors", json=doctor_data, headers=admin["headers"])
        assert response.status_code == 201

        data = response.json()
        assert data["id"]
        assert data["first_name"] == "Meredith"

    def test_create_doctor_requires_admin(self, client, patient, doctor_user):
        """Test that patients and doctors cannot add doctors."""
        for user in (patient, doctor_user):
            response = client.post("/api/v1/doctors", json=doctor_data, headers=user["headers"])
            assert response.status_code == 403

    def test_create_doctor_missing_fields(self, client, admin):
        response = client.post(
            "/api/v1/doctors",
            json={"first_name": "Meredith"},
            headers=admin["headers"]
        )
        assert response.status_code == 422

    def test_update_doctor(self, client, admin, doctor_id):
        """Test that only the provided fields change."""
        response = client.put(
            f"/api/v1/doctors/{doctor_id}",
            json={"specialization": "Nephrology", "first_name": ""},
            headers=admin["headers"]
        )
        assert response.status_code == 200

        data = response.json()
        assert data["specialization"] == "Nephrology"
        assert data["first_name"] == "Gregory"

    def test_update_doctor_without_changes(self, client, admin, doctor_id):
        response = client.put(f"/api/v1/doctors/{doctor_id}", json={}, headers=admin["headers"])
        assert response.status_code == 400

    def test_delete_doctor(self, client, admin, doctor_id, morning_schedule):
        """Test that deleting a doctor also removes their schedules."""
        response = client.delete(f"/api/v1/doctors/{doctor_id}", headers=admin["headers"])
        assert response.status_code == 200

        assert client.get(f"/api/v1/doctors/{doctor_id}").status_code == 404
        assert client.get(f"/api/v1/doctors/{doctor_id}/schedules").json() == []

    def test_delete_doctor_with_appointments(self, client, db_session, admin, patient, doctor_id):
        """Test that doctors referenced by appointments cannot be deleted."""
        make_appointment(db_session, patient["id"], doctor_id, FUTURE_DATE, time(9, 0))

        response = client.delete(f"/api/v1/doctors/{doctor_id}", headers=admin["headers"])
        assert response.status_code == 400
        assert client.get(f"/api/v1/doctors/{doctor_id}").status_code == 200

class TestSchedules:

    def schedule_payload(self, doctor_id, start="09:00", end="11:00", on_date=FUTURE_DATE):
        return {
            "doctor_id": doctor_id,
            "date": on_date.isoformat(),
            "start_time": start,
            "end_time": end
        }

    def test_create_schedule(self, client, admin, doctor_id):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id),
            headers=admin["headers"]
        )
        assert response.status_code == 201

        data = response.json()
        assert data["doctor_id"] == doctor_id
        assert data["start_time"] == "09:00:00"
        assert data["end_time"] == "11:00:00"

    def test_create_schedule_requires_admin(self, client, patient, doctor_id):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id),
            headers=patient["headers"]
        )
        assert response.status_code == 403

    def test_create_schedule_with_inverted_range(self, client, admin, doctor_id):
        """Test that a window must start before it ends."""
        for start, end in (("11:00", "09:00"), ("10:00", "10:00")):
            response = client.post(
                "/api/v1/schedules",
                json=self.schedule_payload(doctor_id, start, end),
                headers=admin["headers"]
            )
            assert response.status_code == 422

    def test_create_schedule_shorter_than_a_minute(self, client, admin, patient, doctor_id):
        """Test that seconds are dropped before the range check."""
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id, "09:00:10", "09:00:50"),
            headers=admin["headers"]
        )
        assert response.status_code == 422

        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            params={"date": FUTURE_DATE.isoformat()},
            headers=patient["headers"]
        )
        assert response.status_code == 200
        assert response.json() == []

    def test_create_schedule_drops_seconds(self, client, admin, doctor_id):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id, "09:00:30", "10:00:45"),
            headers=admin["headers"]
        )
        assert response.status_code == 201

        data = response.json()
        assert data["start_time"] == "09:00:00"
        assert data["end_time"] == "10:00:00"

    def test_update_schedule_into_same_minute(self, client, admin, doctor_id, morning_schedule):
        response = client.put(
            f"/api/v1/schedules/{morning_schedule}",
            json={"start_time": "10:59:10", "end_time": "10:59:50"},
            headers=admin["headers"]
        )
        assert response.status_code == 422

    def test_create_schedule_for_unknown_doctor(self, client, admin):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(999),
            headers=admin["headers"]
        )
        assert response.status_code == 404

    def test_overlapping_schedule_rejected(self, client, admin, doctor_id, morning_schedule):
        """Test that windows of one doctor and date must not overlap."""
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id, "10:30", "12:00"),
            headers=admin["headers"]
        )
        assert response.status_code == 409

    def test_adjacent_schedule_allowed(self, client, admin, doctor_id, morning_schedule):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id, "11:00", "12:00"),
            headers=admin["headers"]
        )
        assert response.status_code == 201

    def test_same_hours_on_another_date_allowed(self, client, admin, doctor_id, morning_schedule):
        response = client.post(
            "/api/v1/schedules",
            json=self.schedule_payload(doctor_id, on_date=FUTURE_DATE + timedelta(days=1)),
            headers=admin["headers"]
        )
        assert response.status_code == 201

    def test_list_schedules_by_date(self, client, db_session, doctor_id, morning_schedule):
        make_schedule(db_session, doctor_id, FUTURE_DATE, time(14, 0), time(16, 0))
        make_schedule(db_session, doctor_id, FUTURE_DATE + timedelta(days=1), time(9, 0), time(10, 0))

        all_windows = client.get(f"/api/v1/doctors/{doctor_id}/schedules").json()
        assert len(all_windows) == 3

        response = client.get(
            f"/api/v1/doctors/{doctor_id}/schedules",
            params={"date": FUTURE_DATE.isoformat()}
        )
        assert response.status_code == 200
        assert [w["start_time"] for w in response.json()] == ["09:00:00", "14:00:00"]

    def test_update_schedule(self, client, admin, doctor_id, morning_schedule):
        response = client.put(
            f"/api/v1/schedules/{morning_schedule}",
            json={"end_time": "12:00"},
            headers=admin["headers"]
        )
        assert response.status_code == 200
        assert response.json()["end_time"] == "12:00:00"

    def test_update_schedule_inverted_range(self, client, admin, doctor_id, morning_schedule):
        response = client.put(
            f"/api/v1/schedules/{morning_schedule}",
            json={"start_time": "11:30"},
            headers=admin["headers"]
        )
        assert response.status_code == 422

    def test_update_schedule_into_overlap(self, client, db_session, admin, doctor_id, morning_schedule):
        afternoon = make_schedule(db_session, doctor_id, FUTURE_DATE, time(14, 0), time(16, 0))

        response = client.put(
            f"/api/v1/schedules/{afternoon}",
            json={"start_time": "10:00"},
            headers=admin["headers"]
        )
        assert response.status_code == 409

    def test_update_schedule_without_changes(self, client, admin, morning_schedule):
        response = client.put(
            f"/api/v1/schedules/{morning_schedule}",
            json={},
            headers=admin["headers"]
        )
        assert response.status_code == 400

    def test_delete_schedule(self, client, admin, doctor_id, morning_schedule):
        response = client.delete(f"/api/v1/schedules/{morning_schedule}", headers=admin["headers"])
        assert response.status_code == 200

        assert client.get(f"/api/v1/doctors/{doctor_id}/schedules").json() == []
        response = client.delete(f"/api/v1/schedules/{morning_schedule}", headers=admin["headers"])
        assert response.status_code == 404

class TestAvailableSlots:

    def test_free_morning(self, client, patient, doctor_id, morning_schedule):
        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            params={"date": FUTURE_DATE.isoformat()},
            headers=patient["headers"]
        )
        assert response.status_code == 200
        assert response.json() == [
            {"start_time": "09:00", "end_time": "09:30"},
            {"start_time": "09:30", "end_time": "10:00"},
            {"start_time": "10:00", "end_time": "10:30"},
            {"start_time": "10:30", "end_time": "11:00"},
        ]

    def test_booked_slot_is_not_offered(self, client, db_session, patient, doctor_id, morning_schedule):
        make_appointment(db_session, patient["id"], doctor_id, FUTURE_DATE, time(9, 30))

        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            params={"date": FUTURE_DATE.isoformat()},
            headers=patient["headers"]
        )
        assert [s["start_time"] for s in response.json()] == ["09:00", "10:00", "10:30"]

    def test_no_schedule_returns_empty_list(self, client, patient, doctor_id):
        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            params={"date": FUTURE_DATE.isoformat()},
            headers=patient["headers"]
        )
        assert response.status_code == 200
        assert response.json() == []

    def test_date_is_required(self, client, patient, doctor_id):
        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            headers=patient["headers"]
        )
        assert response.status_code == 422

    def test_requires_authentication(self, client, doctor_id):
        response = client.get(
            f"/api/v1/doctors/{doctor_id}/available-slots",
            params={"date": FUTURE_DATE.isoformat()}
        )
        assert response.status_code in (401, 403)
