"""Integration tests for profile endpoints."""

import repositories.db_models as db_models
from services.admin_service import AdminService


class TestOwnProfile:
    def test_get_own_profile(self, client, auth_headers, student):
        response = client.get("/api/profile", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == student.id
        assert data["firstName"] == "Alice"
        assert data["visibility"] == "PUBLIC"

    def test_get_own_profile_requires_token(self, client):
        assert client.get("/api/profile").status_code == 401

    def test_invalid_token(self, client):
        response = client.get(
            "/api/profile", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Could not validate credentials"

    def test_update_profile_resubmits_for_review(self, client, auth_headers):
        response = client.put(
            "/api/profile",
            json={"bio": "Hello there", "github": "https://github.com/alice"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Hello there"
        assert data["github"] == "https://github.com/alice"
        assert data["status"] == "PENDING"

    def test_update_rejects_bad_linkedin(self, client, auth_headers):
        response = client.put(
            "/api/profile",
            json={"linkedin": "https://example.com/me"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"]["linkedin"] == "Invalid LinkedIn URL"

    def test_banned_words_are_flagged(
        self, client, db_session, auth_headers, admin_auth_headers, student
    ):
        client.post(
            "/api/admin/banned-words", json={"word": "spam"}, headers=admin_auth_headers
        )

        response = client.put(
            "/api/profile", json={"bio": "Buy SPAM today"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert "bio" in response.json()["message"]
        rows = db_session.query(db_models.FlaggedContent).all()
        assert len(rows) == 1
        assert rows[0].user_id == student.id

    def test_update_visibility(self, client, auth_headers):
        response = client.put(
            "/api/profile/visibility",
            json={"visibility": "students_only"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["visibility"] == "STUDENTS_ONLY"

    def test_update_visibility_unknown_value(self, client, auth_headers):
        response = client.put(
            "/api/profile/visibility",
            json={"visibility": "FRIENDS"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert "visibility" in response.json()["errors"]


class TestUploads:
    def test_upload_photo(self, client, auth_headers, student):
        response = client.post(
            "/api/profile/photo",
            files={"file": ("me.png", b"\x89PNG\r\n\x1a\n", "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["photoUrl"].endswith(
            f"/{student.id}/profile_photo.png"
        )

    def test_upload_photo_rejects_pdf(self, client, auth_headers):
        response = client.post(
            "/api/profile/photo",
            files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_upload_national_id_scan(self, client, auth_headers, student):
        response = client.post(
            "/api/profile/national-id-scan",
            files={"file": ("id.jpg", b"\xff\xd8\xff", "image/jpeg")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["scanUrl"].endswith(
            f"/{student.id}/national_id_scan.jpg"
        )


class TestOtherProfiles:
    def test_public_profile_visible_anonymously(self, client, student):
        response = client.get(f"/api/profile/{student.id}")

        assert response.status_code == 200
        assert response.json()["email"] == student.email

    def test_private_profile_forbidden(self, client, auth_headers, admin_user):
        response = client.get(f"/api/profile/{admin_user.id}", headers=auth_headers)

        assert response.status_code == 403

    def test_students_only_profile(self, client, db_session, auth_headers, make_user):
        classmate = make_user(
            "classmate@eng.psu.edu.eg",
            "29901012222222",
            visibility=db_models.ProfileVisibility.STUDENTS_ONLY,
        )

        assert client.get(f"/api/profile/{classmate.id}").status_code == 403
        response = client.get(f"/api/profile/{classmate.id}", headers=auth_headers)
        assert response.status_code == 200

    def test_pending_profile_visible_after_verify_and_approve(
        self, client, db_session, pending_student, admin_user, mailer
    ):
        assert client.get(f"/api/profile/{pending_student.id}").status_code == 403

        token = AdminService.send_email_verification(
            db_session, pending_student.id, mailer
        )
        AdminService.verify_email(db_session, pending_student.id, token)
        AdminService.approve_user(db_session, pending_student.id, admin_user.id, mailer)

        response = client.get(f"/api/profile/{pending_student.id}")
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"

    def test_unknown_profile(self, client):
        assert client.get("/api/profile/9999").status_code == 404

    def test_malformed_token_treated_as_anonymous(self, client, student):
        response = client.get(
            f"/api/profile/{student.id}",
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == 200

    def test_public_students_directory(
        self, client, student, pending_student, admin_user
    ):
        response = client.get("/api/profile/public-students")

        assert response.status_code == 200
        assert [p["userId"] for p in response.json()] == [student.id]
