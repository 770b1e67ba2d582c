"""Integration tests for public reference data and app-level behaviour."""


class TestPublicRouter:
    def test_list_faculties(self, client, faculty):
        response = client.get("/api/public/faculties")

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": faculty.id,
                "name": "Faculty of Engineering",
                "description": "Engineering programmes",
                "yearsNumbers": 5,
            }
        ]

    def test_list_departments_filtered(self, client, department, other_department):
        everything = client.get("/api/public/departments").json()
        filtered = client.get(
            "/api/public/departments", params={"facultyId": department.faculty_id}
        ).json()

        assert len(everything) == 2
        assert [d["id"] for d in filtered] == [department.id]
        assert filtered[0]["facultyId"] == department.faculty_id


class TestAppBehaviour:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    def test_request_id_generated(self, client):
        response = client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 12

    def test_error_body_carries_request_id(self, client):
        response = client.get(
            "/api/admin/users/1",
            headers={"X-Request-ID": "req-42", "Authorization": "Bearer bad"},
        )

        assert response.status_code == 401
        body = response.json()
        assert body["status"] == "ERROR"
        assert body["request_id"] == "req-42"
        assert body["path"] == "/api/admin/users/1"

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json()["status"] == "ERROR"
