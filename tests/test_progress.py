import pytest

from app.models import CourseProgress
from conftest import auth


def mark(client, course_id, lecture_id, user_id="user_student"):
    return client.post(
        "/api/user/update-course-progress",
        json={"course_id": course_id, "lecture_id": lecture_id},
        headers=auth(user_id),
    )


def fetch(client, course_id, user_id="user_student"):
    return client.post(
        "/api/user/get-course-progress",
        json={"course_id": course_id},
        headers=auth(user_id),
    )


@pytest.mark.api
class TestCourseProgress:
    def test_no_record_returns_null(self, client, make_user, make_course):
        make_user("user_student")
        course = make_course()

        response = fetch(client, course.id)

        assert response.status_code == 200
        assert response.json() == {"success": True, "progress_data": None}

    def test_mark_creates_record(self, client, make_user, make_course):
        make_user("user_student")
        course = make_course()

        response = mark(client, course.id, "lec1")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Progress Updated"}
        data = fetch(client, course.id).json()["progress_data"]
        assert data["lecture_completed"] == ["lec1"]
        assert data["completed"] is False

    def test_marking_twice_is_idempotent(self, client, make_user, make_course, db_session):
        make_user("user_student")
        course = make_course()

        mark(client, course.id, "lec1")
        mark(client, course.id, "lec1")

        records = (
            db_session.query(CourseProgress)
            .filter(CourseProgress.user_id == "user_student")
            .all()
        )
        assert len(records) == 1
        assert records[0].lecture_completed == ["lec1"]

    def test_completed_when_every_lecture_done(self, client, make_user, make_course):
        make_user("user_student")
        course = make_course()

        mark(client, course.id, "lec2")
        mark(client, course.id, "lec1")

        data = fetch(client, course.id).json()["progress_data"]
        assert data["lecture_completed"] == ["lec2", "lec1"]
        assert data["completed"] is True

    def test_progress_is_per_user(self, client, identity, make_user, make_course):
        make_user("user_student")
        make_user("user_other", name="Other")
        course = make_course()

        mark(client, course.id, "lec1")

        assert fetch(client, course.id, "user_other").json()["progress_data"] is None

    def test_unknown_course(self, client, make_user):
        make_user("user_student")
        response = mark(client, 4242, "lec1")
        assert response.status_code == 404
        assert response.json()["message"] == "Course not found"

    def test_empty_lecture_id_rejected(self, client, make_user, make_course):
        make_user("user_student")
        course = make_course()
        response = mark(client, course.id, "")
        assert response.status_code == 422
        assert response.json()["success"] is False
