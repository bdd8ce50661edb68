from datetime import date

import pytest

from models import Payment


def _pay(client, student_id, amount, **extra):
    payload = {"student_id": student_id, "amount": amount, **extra}
    return client.post('/payments', json=payload)


def _statuses(client, query=''):
    response = client.get(f'/payments/status{query}')
    assert response.status_code == 200
    return {row["first_name"]: row for row in response.get_json()["students"]}


def test_record_payment(make_student, auth_client, operator):
    student = make_student()
    response = _pay(auth_client, student["id"], "125.50", payment_date="2025-02-01", notes="First installment")
    assert response.status_code == 201
    assert response.get_json()["payment"] == {
        "id": 1,
        "student_id": student["id"],
        "amount": "125.50",
        "payment_date": "2025-02-01",
        "notes": "First installment",
    }
    assert Payment.query.one().created_by == operator.id


def test_payment_date_defaults_to_today(make_student, auth_client):
    student = make_student()
    response = _pay(auth_client, student["id"], "10")
    assert response.get_json()["payment"]["payment_date"] == date.today().isoformat()


def test_negative_amount_is_accepted_as_refund(make_student, auth_client):
    student = make_student(total_tuition="500")
    _pay(auth_client, student["id"], "500")
    response = _pay(auth_client, student["id"], "-200", notes="Refund")
    assert response.status_code == 201
    row = _statuses(auth_client)[student["first_name"]]
    assert row["total_paid"] == "300.00"
    assert row["status"] == "partial"


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"amount": "10"}, "student_id"),
        ({"student_id": "abc", "amount": "10"}, "student_id"),
        ({"student_id": 1}, "amount"),
        ({"student_id": 1, "amount": "ten"}, "amount"),
        ({"student_id": 1, "amount": "10", "payment_date": "02/01/2025"}, "payment_date"),
    ],
)
def test_record_payment_validation(auth_client, make_student, payload, field):
    make_student()
    response = auth_client.post('/payments', json=payload)
    assert response.status_code == 400
    assert response.get_json()["field"] == field


def test_record_payment_unknown_student(auth_client):
    response = _pay(auth_client, 404, "10")
    assert response.status_code == 404
    assert Payment.query.count() == 0


def test_list_payments_newest_first_with_student_name(make_student, auth_client):
    student = make_student(first_name="Ana", last_name="Lopez")
    _pay(auth_client, student["id"], "10", payment_date="2025-01-01")
    _pay(auth_client, student["id"], "20", payment_date="2025-06-01")
    payments = auth_client.get('/payments').get_json()["payments"]
    assert [p["amount"] for p in payments] == ["20.00", "10.00"]
    assert payments[0]["student_name"] == "Ana Lopez"


def test_payment_status_list(make_student, auth_client):
    paid = make_student(first_name="Paula", total_tuition="100")
    partial = make_student(first_name="Pedro", total_tuition="500")
    make_student(first_name="Ursula", total_tuition="300")
    free = make_student(first_name="Zoe", total_tuition="0")
    _pay(auth_client, paid["id"], "60")
    _pay(auth_client, paid["id"], "50")
    _pay(auth_client, partial["id"], "200")

    rows = _statuses(auth_client)
    assert rows["Paula"]["status"] == "paid"
    assert rows["Paula"]["balance"] == "-10.00"
    assert rows["Pedro"]["status"] == "partial"
    assert rows["Pedro"]["status_label"] == "Partial Payment"
    assert rows["Pedro"]["balance"] == "300.00"
    assert rows["Ursula"]["status"] == "unpaid"
    assert rows["Ursula"]["total_paid"] == "0.00"
    assert rows["Zoe"]["status"] == "paid"
    assert free["id"] in {row["id"] for row in rows.values()}


@pytest.mark.parametrize(
    "query, expected",
    [
        ("", {"Paula", "Pedro", "Ursula"}),
        ("?status=all", {"Paula", "Pedro", "Ursula"}),
        ("?status=paid", {"Paula"}),
        ("?status=Partial%20Payment", {"Pedro"}),
        ("?status=unpaid", {"Ursula"}),
    ],
)
def test_payment_status_filter(make_student, auth_client, query, expected):
    paid = make_student(first_name="Paula", total_tuition="100")
    partial = make_student(first_name="Pedro", total_tuition="500")
    make_student(first_name="Ursula", total_tuition="300")
    _pay(auth_client, paid["id"], "100")
    _pay(auth_client, partial["id"], "1")
    assert set(_statuses(auth_client, query)) == expected


def test_payment_status_filter_rejects_unknown(auth_client):
    response = auth_client.get('/payments/status?status=Pagado')
    assert response.status_code == 400
    assert response.get_json()["field"] == "status"


def test_delete_payment(make_student, auth_client):
    student = make_student()
    payment = _pay(auth_client, student["id"], "10").get_json()["payment"]
    assert auth_client.delete(f'/payments/{payment["id"]}').status_code == 204
    assert Payment.query.count() == 0
    assert auth_client.delete(f'/payments/{payment["id"]}').status_code == 404


def test_record_payment_student_id_beyond_column(auth_client):
    response = _pay(auth_client, str(10**30), "10")
    assert response.status_code == 400
    assert response.get_json() == {"error": "Select a student", "field": "student_id"}
    assert Payment.query.count() == 0


def test_record_payment_rejects_date_with_trailing_text(make_student, auth_client):
    student = make_student()
    response = _pay(auth_client, student["id"], "10", payment_date="2025-02-01garbage")
    assert response.status_code == 400
    assert response.get_json()["field"] == "payment_date"
    assert Payment.query.count() == 0


def test_delete_payment_id_beyond_column(auth_client):
    assert auth_client.delete(f'/payments/{10**30}').status_code == 404
