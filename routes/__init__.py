from flask import request


def request_payload() -> dict:
    """JSON body when present, otherwise the submitted form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
