"""Shared fixtures for the attendance test suite."""
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from app import create_app, db
from app.models import (
    User, UserRole, Course, ClassEnrollment, AttendanceSession
)
from app.utils.helpers import utcnow


@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def lecturer(app):
    return User(
        email='lecturer@example.com',
        full_name='Test Lecturer',
        role=UserRole.LECTURER
    ).save()

@pytest.fixture
def student(app):
    return User(
        email='student@example.com',
        full_name='Test Student',
        role=UserRole.STUDENT,
        student_reg_no='CS0001'
    ).save()

@pytest.fixture
def course(app, lecturer):
    return Course(code='CS101', name='Programming', lecturer_id=lecturer.id).save()

@pytest.fixture
def enrolled_student(student, course):
    ClassEnrollment(student_id=student.id, class_id=course.id).save()
    return student

@pytest.fixture
def make_session(course, lecturer):
    """Factory for attendance sessions on the test course."""
    def _make_session(**overrides):
        values = {
            'class_id': course.id,
            'lecturer_id': lecturer.id,
            'expires_at': utcnow() + timedelta(hours=1),
            'is_active': True,
            'location_required': False,
        }
        values.update(overrides)
        return AttendanceSession(**values).save()
    return _make_session

@pytest.fixture
def auth_headers(student):
    token = create_access_token(identity=student.id)
    return {'Authorization': f'Bearer {token}'}
