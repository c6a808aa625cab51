"""
Enrollment bookkeeping and ratings.
"""

import pytest

from app.models import Course, User
from app.services.enrollment import EnrollmentService
from conftest import auth


class TestEnrollmentService:
    def test_enroll_updates_both_sides(self, db_session, make_user, make_course):
        user = make_user("user_student")
        course = make_course()

        assert EnrollmentService(db_session).enroll(user, course) is True

        db_session.expire_all()
        assert db_session.get(User, "user_student").enrolled_courses == [course.id]
        assert db_session.get(Course, course.id).enrolled_students == ["user_student"]

    def test_enroll_is_idempotent(self, db_session, make_user, make_course):
        user = make_user("user_student")
        course = make_course()
        service = EnrollmentService(db_session)

        service.enroll(user, course)
        assert service.enroll(user, course) is False

        db_session.expire_all()
        assert db_session.get(User, "user_student").enrolled_courses == [course.id]
        assert db_session.get(Course, course.id).enrolled_students == ["user_student"]

    def test_enroll_repairs_one_sided_state(self, db_session, make_user, make_course):
        user = make_user("user_student")
        course = make_course(enrolled_students=["user_student"])

        assert EnrollmentService(db_session).enroll(user, course) is True

        db_session.expire_all()
        assert db_session.get(User, "user_student").enrolled_courses == [course.id]
        assert db_session.get(Course, course.id).enrolled_students == ["user_student"]

    def test_enroll_by_ids_missing_rows(self, db_session, make_user):
        make_user("user_student")
        assert EnrollmentService(db_session).enroll_by_ids("user_student", 999) is False
        assert EnrollmentService(db_session).enroll_by_ids("user_ghost", 999) is False

    def test_enrolled_courses_keep_order(self, db_session, make_user, make_course):
        first = make_course(title="First")
        second = make_course(title="Second")
        user = make_user("user_student", enrolled_courses=[second.id, first.id])

        courses = EnrollmentService(db_session).get_enrolled_courses(user)

        assert [c.title for c in courses] == ["Second", "First"]


@pytest.mark.api
class TestEnrolledCoursesEndpoint:
    def test_lists_enrolled_courses(self, client, make_user, make_course):
        course = make_course()
        make_course(title="Not mine")
        make_user("user_student", enrolled_courses=[course.id])

        response = client.get("/api/user/enrolled-courses", headers=auth("user_student"))

        assert response.status_code == 200
        titles = [c["title"] for c in response.json()["enrolled_courses"]]
        assert titles == ["Python 101"]

    def test_empty(self, client, make_user):
        make_user("user_student")
        response = client.get("/api/user/enrolled-courses", headers=auth("user_student"))
        assert response.json() == {"success": True, "enrolled_courses": []}


@pytest.mark.api
class TestRatings:
    def rate(self, client, course_id, rating, user_id="user_student"):
        return client.post(
            "/api/user/add-rating",
            json={"course_id": course_id, "rating": rating},
            headers=auth(user_id),
        )

    def test_enrolled_user_can_rate(self, client, make_user, make_course, db_session):
        course = make_course()
        make_user("user_student", enrolled_courses=[course.id])

        response = self.rate(client, course.id, 4)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Rating added"}
        db_session.expire_all()
        assert db_session.get(Course, course.id).ratings == [
            {"user_id": "user_student", "rating": 4}
        ]

    def test_second_rating_replaces_first(self, client, make_user, make_course, db_session):
        course = make_course(ratings=[{"user_id": "someone_else", "rating": 5}])
        make_user("user_student", enrolled_courses=[course.id])

        self.rate(client, course.id, 4)
        self.rate(client, course.id, 2)

        db_session.expire_all()
        assert db_session.get(Course, course.id).ratings == [
            {"user_id": "someone_else", "rating": 5},
            {"user_id": "user_student", "rating": 2},
        ]

    def test_not_enrolled(self, client, make_user, make_course, db_session):
        course = make_course()
        make_user("user_student")

        response = self.rate(client, course.id, 5)

        assert response.status_code == 403
        assert response.json()["message"] == "User is not enrolled in this course."
        db_session.expire_all()
        assert db_session.get(Course, course.id).ratings == []

    @pytest.mark.parametrize("rating", [0, 6])
    def test_out_of_range(self, client, make_user, make_course, rating):
        course = make_course()
        make_user("user_student", enrolled_courses=[course.id])

        response = self.rate(client, course.id, rating)

        assert response.status_code == 422

    def test_unknown_course(self, client, make_user):
        make_user("user_student")
        response = self.rate(client, 31337, 3)
        assert response.status_code == 404
