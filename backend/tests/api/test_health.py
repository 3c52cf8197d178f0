"""Health and readiness endpoint tests."""


def test_health(client):
    response = client.get("/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_checks_database(client):
    response = client.get("/v1/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["checks"]["db"]["status"] == "ok"


def test_request_id_is_echoed(client):
    response = client.get("/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_missing_token_uses_error_envelope(client):
    response = client.get("/v1/tests")
    assert response.status_code == 401
    body = response.json()
    assert body["error_code"] == "UNAUTHORIZED"
    assert body["message"] == "Authorization header missing"
    assert body["request_id"]


def test_invalid_token_rejected(client):
    response = client.get("/v1/tests", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_rejected(client, test_user):
    from datetime import timedelta

    from app.core.security import create_access_token

    token = create_access_token(test_user.id, test_user.role, expires_in=timedelta(seconds=-30))
    response = client.get("/v1/tests", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_inactive_user_forbidden(client, db, test_user, auth_headers_student):
    test_user.is_active = False
    db.commit()
    response = client.get("/v1/me/stats", headers=auth_headers_student)
    assert response.status_code == 403
    assert response.json()["error_code"] == "USER_INACTIVE"
