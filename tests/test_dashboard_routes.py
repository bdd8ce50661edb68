def test_dashboard_empty(auth_client):
    response = auth_client.get('/dashboard/stats')
    assert response.status_code == 200
    assert response.get_json() == {
        "total_students": 0,
        "total_payments": "0.00",
        "pending_payments": 0,
        "average_grade": None,
    }


def test_dashboard_stats(make_student, auth_client):
    paid = make_student(total_tuition="100")
    partial = make_student(total_tuition="500")
    for amount in ("60", "50"):
        auth_client.post('/payments', json={"student_id": paid["id"], "amount": amount})
    auth_client.post('/payments', json={"student_id": partial["id"], "amount": "200"})
    for subject_id, grade in ((1, "80"), (2, "90"), (3, "70")):
        auth_client.post('/grades', json={"student_id": paid["id"], "subject_id": subject_id, "grade": grade})

    stats = auth_client.get('/dashboard/stats').get_json()
    assert stats == {
        "total_students": 2,
        "total_payments": "310.00",
        "pending_payments": 1,
        "average_grade": "80.0",
    }


def test_dashboard_zero_grade_is_not_missing(make_student, auth_client):
    student = make_student()
    auth_client.post('/grades', json={"student_id": student["id"], "subject_id": 1, "grade": "0"})
    assert auth_client.get('/dashboard/stats').get_json()["average_grade"] == "0.0"


def test_dashboard_pending_includes_students_without_payments(make_student, auth_client):
    make_student(total_tuition="300")
    make_student(total_tuition="0")
    stats = auth_client.get('/dashboard/stats').get_json()
    assert stats["total_students"] == 2
    assert stats["pending_payments"] == 1
