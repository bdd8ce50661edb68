from models import Grade, Subject


def test_default_subjects_are_seeded(auth_client):
    subjects = auth_client.get('/subjects').get_json()["subjects"]
    assert [s["name"] for s in subjects] == [
        "Language Arts",
        "Mathematics",
        "Physical Education",
        "Science",
        "Social Studies",
    ]


def test_create_subject(auth_client):
    response = auth_client.post('/subjects', json={"name": "Music", "description": "Choir and theory"})
    assert response.status_code == 201
    assert response.get_json()["subject"]["name"] == "Music"
    assert Subject.query.filter_by(name="Music").count() == 1


def test_create_subject_duplicate_name(auth_client):
    response = auth_client.post('/subjects', json={"name": "Science"})
    assert response.status_code == 409


def test_create_subject_requires_name(auth_client):
    response = auth_client.post('/subjects', json={"description": "no name"})
    assert response.status_code == 400
    assert response.get_json()["field"] == "name"


def test_record_grade(make_student, auth_client, operator):
    student = make_student(first_name="Ana", last_name="Lopez")
    math = Subject.query.filter_by(name="Mathematics").one()
    response = auth_client.post('/grades', json={
        "student_id": student["id"],
        "subject_id": math.id,
        "grade": "91.25",
        "observations": "Strong in algebra",
    })
    assert response.status_code == 201
    grade = response.get_json()["grade"]
    assert grade["grade"] == "91.25"
    assert grade["subject"] == "Mathematics"
    assert grade["observations"] == "Strong in algebra"
    assert Grade.query.one().created_by == operator.id


def test_same_subject_can_be_graded_repeatedly(make_student, auth_client):
    student = make_student()
    for value in ("70", "75", "80"):
        response = auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 1, "grade": value})
        assert response.status_code == 201
    assert Grade.query.count() == 3


def test_list_grades_newest_first(make_student, auth_client):
    student = make_student(first_name="Ana", last_name="Lopez")
    auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 1, "grade": "60"})
    auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 2, "grade": "95"})
    grades = auth_client.get('/grades').get_json()["grades"]
    assert [g["grade"] for g in grades] == ["95.00", "60.00"]
    assert grades[0]["student_name"] == "Ana Lopez"


def test_record_grade_unknown_subject(make_student, auth_client):
    student = make_student()
    response = auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 99, "grade": "50"})
    assert response.status_code == 404
    assert response.get_json() == {"error": "Subject not found"}


def test_record_grade_validation(make_student, auth_client):
    student = make_student()
    response = auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 1, "grade": "1000"})
    assert response.status_code == 400
    assert response.get_json()["field"] == "grade"
    response = auth_client.post('/grades', json={"student_id": student["id"], "grade": "50"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Select a subject", "field": "subject_id"}


def test_record_grade_subject_id_beyond_column(make_student, auth_client):
    student = make_student()
    response = auth_client.post('/grades', json={"student_id": student["id"], "subject_id": str(10**30), "grade": "50"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Select a subject", "field": "subject_id"}
    assert Grade.query.count() == 0
