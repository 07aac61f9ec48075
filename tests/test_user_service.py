"""
User service tests
"""
import pytest

from database.connection import get_db_session
from models.user import Role
from services.exceptions import ConflictError, InvalidInputError, InvalidReferenceError, NotFoundError


def _payload(**overrides):
    data = {
        'fullName': 'Grace Hopper',
        'email': 'Grace.Hopper@Example.com',
        'role': 'Faculty',
        'department': 'Computer Science'
    }
    data.update(overrides)
    return data


class TestRegisterUser:

    @pytest.mark.parametrize('role', ['Faculty', 'FACULTY', 'faculty', ' faculty '])
    def test_role_is_normalised(self, user_service, role):
        user = user_service.register_user(_payload(role=role))

        assert user.role == Role.FACULTY.value
        assert user.email == 'grace.hopper@example.com'
        assert user.email_notifications is True

    def test_unknown_role(self, user_service):
        with pytest.raises(InvalidInputError):
            user_service.register_user(_payload(role='Dean'))

    def test_student_requires_student_id(self, user_service):
        with pytest.raises(InvalidInputError):
            user_service.register_user(_payload(role='Student'))

        user = user_service.register_user(_payload(role='Student', studentId='S100200'))
        assert user.student_id == 'S100200'

    def test_duplicate_email_conflicts(self, user_service):
        user_service.register_user(_payload())

        with pytest.raises(ConflictError):
            user_service.register_user(_payload(email='grace.hopper@example.com'))

    @pytest.mark.parametrize('field, value', [('fullName', ''), ('email', 'not-an-email')])
    def test_validation(self, user_service, field, value):
        with pytest.raises(InvalidInputError):
            user_service.register_user(_payload(**{field: value}))


class TestUpdateProfile:

    def test_updates_contact_number(self, user_service, student):
        user = user_service.update_profile(student.id, {'contactNumber': ' +1 555 0100 '})

        assert user.contact_number == '+1 555 0100'
        assert user.full_name == student.full_name
        assert user_service.get_user(student.id).to_dict()['contactNumber'] == '+1 555 0100'

    def test_empty_contact_number_clears_it(self, user_service, make_user):
        user = make_user(Role.STUDENT, contact_number='555-0101')

        assert user_service.update_profile(user.id, {'contactNumber': ''}).contact_number is None

    def test_updates_email_preference_with_profile(self, user_service, student):
        user = user_service.update_profile(student.id, {'contactNumber': '555-0102', 'emailNotifications': False})

        assert user.email_notifications is False

    @pytest.mark.parametrize('data', [{}, {'fullName': '  '}, {'emailNotifications': 'false'}])
    def test_invalid_updates(self, user_service, student, data):
        with pytest.raises(InvalidInputError):
            user_service.update_profile(student.id, data)

    def test_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.update_profile(4242, {'contactNumber': '555-0103'})


class TestPreferences:

    def test_toggle_email_notifications(self, user_service, student):
        user = user_service.update_notification_preferences(student.id, False)

        assert user.email_notifications is False
        assert user_service.get_user(student.id).to_dict()['notificationPreferences'] == {'email': False}

    def test_requires_boolean(self, user_service, student):
        with pytest.raises(InvalidInputError):
            user_service.update_notification_preferences(student.id, 'no')

    def test_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.update_notification_preferences(4242, True)


def test_list_supervisors_only_returns_faculty(user_service, make_user):
    make_user(Role.STUDENT)
    make_user(Role.ADMIN)
    zed = make_user(Role.FACULTY, full_name='Zed Zimmer')
    amy = make_user(Role.FACULTY, full_name='Amy Adams')

    assert [u.id for u in user_service.list_supervisors()] == [amy.id, zed.id]


class TestResolveSupervisor:

    def test_id_miss_falls_back_to_name(self, user_service, make_user):
        faculty = make_user(Role.FACULTY, full_name='12345')

        with get_db_session() as session:
            assert user_service.resolve_supervisor(session, '12345').id == faculty.id

    @pytest.mark.parametrize('reference', [None, '', True])
    def test_empty_references(self, user_service, reference):
        with get_db_session() as session:
            with pytest.raises(InvalidReferenceError):
                user_service.resolve_supervisor(session, reference)
