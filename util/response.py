from flask import jsonify


def success(data=None, message=None, status=200, pagination=None, headers=None):
    body = {"status": "success"}
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    if message:
        body["message"] = message
    resp = jsonify(body)
    resp.status_code = status
    if headers:
        resp.headers.update(headers)
    return resp
