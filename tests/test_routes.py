"""
HTTP route tests
"""
from datetime import timedelta

from models.timestamps import utcnow
from models.user import Role


def _upload(client, student, faculty, **overrides):
    body = {
        'studentName': student.full_name,
        'studentId': student.student_id,
        'department': 'Computer Science',
        'fileUrl': 'https://files.example.com/thesis.pdf',
        'supervisorId': faculty.id
    }
    body.update(overrides)
    return client.post('/api/v1/thesis/upload', json=body)


def test_health(client):
    response = client.get('/api/v1/health')

    assert response.status_code == 200
    assert response.get_json()['database_available'] is True


class TestThesisRoutes:

    def test_upload_and_duplicate(self, client, student, faculty):
        first = _upload(client, student, faculty)
        second = _upload(client, student, faculty)

        assert first.status_code == 201
        assert first.get_json()['thesis']['version'] == 1
        assert second.status_code == 409
        assert second.get_json()['code'] == 'CONFLICT'

    def test_upload_with_student_supervisor(self, client, student, make_user):
        not_faculty = make_user(Role.STUDENT)

        response = _upload(client, student, not_faculty)

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_REFERENCE'

    def test_resubmission_round_trip(self, client, student, faculty, kafka_service):
        thesis_id = _upload(client, student, faculty).get_json()['thesis']['id']

        requested = client.post('/api/v1/thesis/request-resubmission', json={
            'thesisId': thesis_id, 'reason': 'missing citations', 'facultyId': str(faculty.id)
        })
        status = client.get(f'/api/v1/thesis/resubmission-status/{student.student_id}')
        resubmitted = client.post('/api/v1/thesis/submit-resubmission', json={
            'originalThesisId': thesis_id,
            'studentId': student.student_id,
            'fileUrl': 'https://files.example.com/thesis-v2.pdf'
        })
        history = client.get(f'/api/v1/thesis/version-history/{thesis_id}')

        assert requested.status_code == 200
        assert requested.get_json()['thesis']['status'] == 'Resubmit'
        assert status.get_json()['resubmissionRequested'] is True
        assert resubmitted.status_code == 201
        assert resubmitted.get_json()['thesis']['version'] == 2
        assert history.get_json()['totalVersions'] == 2
        assert [v['version'] for v in history.get_json()['versions']] == [2, 1]
        assert kafka_service.publish_notification_email.call_count == 2

    def test_resubmit_alias_without_request(self, client, student, faculty):
        thesis_id = _upload(client, student, faculty).get_json()['thesis']['id']

        response = client.post('/api/v1/thesis/resubmit', json={
            'originalThesisId': thesis_id,
            'studentId': student.student_id,
            'fileUrl': 'https://files.example.com/thesis-v2.pdf'
        })

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_STATE'

    def test_request_by_other_faculty_is_forbidden(self, client, student, faculty, make_user):
        other_faculty = make_user(Role.FACULTY)
        thesis_id = _upload(client, student, faculty).get_json()['thesis']['id']

        response = client.post('/api/v1/thesis/request-resubmission', json={
            'thesisId': thesis_id, 'reason': 'missing citations', 'facultyId': other_faculty.id
        })

        assert response.status_code == 403

    def test_missing_thesis(self, client):
        assert client.get('/api/v1/thesis/4242').status_code == 404
        assert client.get('/api/v1/thesis/by-student/S-none').status_code == 404

    def test_request_without_reason(self, client, student, faculty):
        thesis_id = _upload(client, student, faculty).get_json()['thesis']['id']

        response = client.post('/api/v1/thesis/request-resubmission', json={
            'thesisId': thesis_id, 'facultyId': faculty.id
        })

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_INPUT'

    def test_request_without_thesis_id(self, client, faculty):
        response = client.post('/api/v1/thesis/request-resubmission', json={
            'reason': 'missing citations', 'facultyId': faculty.id
        })

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_INPUT'

    def test_status_history(self, client, student, faculty):
        thesis_id = _upload(client, student, faculty).get_json()['thesis']['id']
        client.post('/api/v1/thesis/request-resubmission', json={
            'thesisId': thesis_id, 'reason': 'missing citations', 'facultyId': faculty.id
        })

        response = client.get(f'/api/v1/thesis/status-history/{thesis_id}')

        assert response.status_code == 200
        [entry] = response.get_json()['history']
        assert entry['status'] == 'Resubmit'
        assert entry['comments'] == 'missing citations'
        assert client.get('/api/v1/thesis/status-history/4242').status_code == 404

    def test_listings(self, client, student, faculty):
        _upload(client, student, faculty)

        assert len(client.get('/api/v1/thesis/all').get_json()['theses']) == 1
        assert len(client.get(f'/api/v1/thesis/by-supervisor/{faculty.id}').get_json()['theses']) == 1


class TestFolderRoutes:

    def test_schedule_status_and_list(self, client, make_event, s3_service):
        event = make_event(end_date=utcnow() + timedelta(days=3))

        scheduled = client.post('/api/v1/thesis/schedule-folder-creation', json={'eventId': event.id})
        status = client.get(f'/api/v1/thesis/folder-status/{event.id}')
        listed = client.get('/api/v1/thesis/scheduled-folders')

        assert scheduled.status_code == 200
        assert status.get_json()['event']['thesisFolderCreated'] is True
        assert listed.get_json()['folders'][0]['status'] == 'created'
        s3_service.create_folder.assert_called_once()

    def test_create_folders_requires_event_id(self, client):
        assert client.post('/api/v1/thesis/create-folders', json={}).status_code == 400

    def test_create_folders_for_general_event(self, client, make_event):
        event = make_event(type='General')

        response = client.post('/api/v1/thesis/create-folders', json={'eventId': event.id})

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_manual_trigger(self, client, make_event):
        make_event(end_date=utcnow() + timedelta(days=5))

        response = client.post('/api/v1/thesis/manual-create-folders')

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Processed 1 events'

    def test_unknown_event_status(self, client):
        assert client.get('/api/v1/thesis/folder-status/4242').status_code == 404


class TestNotificationRoutes:

    def test_create_list_count_read(self, client):
        created = client.post('/api/v1/notifications', json={
            'email': 'reader@example.com',
            'message': 'Reminder',
            'scheduledAt': utcnow().isoformat()
        })
        notification_id = created.get_json()['notification']['id']

        listed = client.get('/api/v1/notifications?email=reader@example.com&status=unread')
        read = client.post(f'/api/v1/notifications/{notification_id}/read')
        count = client.get('/api/v1/notifications/count?email=reader@example.com')

        assert created.status_code == 201
        assert len(listed.get_json()['notifications']) == 1
        assert read.get_json()['notification']['read'] is True
        assert count.get_json()['unreadCount'] == 0
        assert count.get_json()['totalCount'] == 1

    def test_create_requires_fields(self, client):
        response = client.post('/api/v1/notifications', json={'email': 'reader@example.com'})

        assert response.status_code == 400

    def test_read_all_and_delete(self, client):
        for _ in range(2):
            client.post('/api/v1/notifications', json={
                'email': 'reader@example.com', 'message': 'Reminder', 'scheduledAt': '2020-01-01'
            })

        read_all = client.post('/api/v1/notifications/read-all', json={'email': 'reader@example.com'})
        due = client.get('/api/v1/notifications/due?email=reader@example.com')
        missing = client.delete('/api/v1/notifications/4242')

        assert read_all.get_json()['modifiedCount'] == 2
        assert len(due.get_json()['notifications']) == 2
        assert missing.status_code == 404

    def test_read_all_needs_recipient(self, client):
        assert client.post('/api/v1/notifications/read-all', json={}).status_code == 400


class TestEventRoutes:

    def test_crud(self, client):
        created = client.post('/api/v1/events', json={'name': 'Defense day', 'endDate': '2030-04-01'})
        event_id = created.get_json()['event']['id']

        updated = client.put(f'/api/v1/events/{event_id}', json={'name': 'Defense day (room 2)'})
        listed = client.get('/api/v1/events')
        deleted = client.delete(f'/api/v1/events/{event_id}')
        deleted_again = client.delete(f'/api/v1/events/{event_id}')

        assert created.status_code == 201
        assert created.get_json()['event']['dueDate'].startswith('2030-04-01T12:00:00')
        assert updated.get_json()['event']['name'] == 'Defense day (room 2)'
        assert len(listed.get_json()['events']) == 1
        assert deleted.status_code == 200
        assert deleted_again.status_code == 404

    def test_create_requires_end_date(self, client):
        assert client.post('/api/v1/events', json={'name': 'Undated'}).status_code == 400


class TestUserRoutes:

    def test_register_get_and_preferences(self, client):
        registered = client.post('/api/v1/users/register', json={
            'fullName': 'Alan Turing', 'email': 'alan@example.com', 'role': 'FACULTY'
        })
        user_id = registered.get_json()['user']['id']

        fetched = client.get(f'/api/v1/users/{user_id}')
        preferences = client.put(f'/api/v1/users/{user_id}/notification-preferences', json={'email': False})
        supervisors = client.get('/api/v1/users/supervisors')

        assert registered.status_code == 201
        assert fetched.get_json()['user']['role'] == 'faculty'
        assert preferences.get_json()['notificationPreferences'] == {'email': False}
        assert [s['id'] for s in supervisors.get_json()['supervisors']] == [user_id]

    def test_duplicate_registration(self, client):
        body = {'fullName': 'Alan Turing', 'email': 'alan@example.com', 'role': 'faculty'}
        client.post('/api/v1/users/register', json=body)

        assert client.post('/api/v1/users/register', json=body).status_code == 409

    def test_update_profile(self, client, student):
        updated = client.put(f'/api/v1/users/{student.id}', json={'contactNumber': '555-0199'})
        empty = client.put(f'/api/v1/users/{student.id}', json={})

        assert updated.status_code == 200
        assert updated.get_json()['user']['contactNumber'] == '555-0199'
        assert empty.status_code == 400
        assert client.put('/api/v1/users/4242', json={'contactNumber': '1'}).status_code == 404

    def test_unknown_user(self, client):
        assert client.get('/api/v1/users/4242').status_code == 404


class TestReportRoutes:

    def test_save_and_send(self, client, student, faculty):
        _upload(client, student, faculty)
        saved = client.post('/api/v1/reports', json={
            'studentId': student.student_id,
            'studentName': student.full_name,
            'facultyId': str(faculty.id),
            'reportType': 'thesis-evaluation'
        })
        report_id = saved.get_json()['report']['id']

        sent = client.put(f'/api/v1/reports/{report_id}/send-to-student')
        student_reports = client.get(f'/api/v1/reports/student/{student.student_id}')
        faculty_reports = client.get(f'/api/v1/reports/faculty/{faculty.id}')

        assert saved.status_code == 201
        assert sent.get_json()['thesis']['status'] == 'Approved'
        assert len(student_reports.get_json()['reports']) == 1
        assert len(faculty_reports.get_json()['reports']) == 1

    def test_send_unknown_report(self, client):
        assert client.put('/api/v1/reports/4242/send-to-student').status_code == 404

    def test_get_and_delete(self, client, student, faculty):
        saved = client.post('/api/v1/reports', json={
            'studentId': student.student_id,
            'studentName': student.full_name,
            'facultyId': str(faculty.id),
            'reportType': 'plagiarism-detection'
        })
        report_id = saved.get_json()['report']['id']

        fetched = client.get(f'/api/v1/reports/{report_id}')
        deleted = client.delete(f'/api/v1/reports/{report_id}')

        assert fetched.status_code == 200
        assert fetched.get_json()['report']['reportType'] == 'plagiarism-detection'
        assert deleted.get_json()['success'] is True
        assert client.get(f'/api/v1/reports/{report_id}').status_code == 404
        assert client.delete(f'/api/v1/reports/{report_id}').status_code == 404
