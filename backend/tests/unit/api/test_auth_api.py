"""
API Tests for signup, signin, signout, profile and password recovery
"""
import pytest

from conftest import signup_payload, signup, TEST_PASSWORD


class TestSignUp:

    @pytest.mark.asyncio
    async def test_signup_success(self, client):
        payload = signup_payload()

        response = await client.post("/api/signup", json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data == {
            "success": True,
            "message": "Student registered successfully!",
            "userUSN": payload['usn'],
            "userName": payload['name'],
        }
        cookie = response.headers.get("set-cookie", "")
        assert "sessionId=" in cookie
        assert "httponly" in cookie.lower()

    @pytest.mark.asyncio
    async def test_signup_signs_in(self, client):
        payload = await signup(client)

        response = await client.get("/api/me")

        assert response.status_code == 200
        data = response.json()
        assert data['userUSN'] == payload['usn']
        assert data['semester'] == payload['sem']
        assert "password" not in str(data).lower()

    @pytest.mark.asyncio
    async def test_signup_accepts_semester_as_string(self, client):
        response = await client.post("/api/signup", json=signup_payload(sem="3"))
        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,error", [
        ({"name": ""}, "All fields are required"),
        ({"password": None}, "All fields are required"),
        ({"usn": "1BM2XCS101"}, "Invalid USN format"),
        ({"usn": "ABM23CS101"}, "Invalid USN format"),
        ({"sem": 9}, "Semester must be between 1 and 8"),
        ({"sem": "first"}, "Semester must be between 1 and 8"),
        ({"mobno": "12345"}, "Mobile number must be 10 digits"),
        ({"email": "not-an-email"}, "Invalid email address"),
        ({"password": "12345"}, "Password must be at least 6 characters long"),
    ])
    async def test_signup_validation(self, client, overrides, error):
        response = await client.post("/api/signup", json=signup_payload(**overrides))

        assert response.status_code == 400
        assert response.json() == {"error": error}

    @pytest.mark.asyncio
    async def test_duplicate_usn(self, client_factory):
        payload = await signup(client_factory())

        duplicate = signup_payload(usn=payload['usn'], email="someone.else@bmsce.ac.in")
        response = await client_factory().post("/api/signup", json=duplicate)

        assert response.status_code == 400
        assert response.json()['error'] == "Student with this USN or email already exists"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client_factory):
        payload = await signup(client_factory())

        response = await client_factory().post("/api/signup", json=signup_payload(email=payload['email']))

        assert response.status_code == 400
        assert response.json()['error'] == "Student with this USN or email already exists"


class TestSignIn:

    @pytest.mark.asyncio
    async def test_signin_success(self, client_factory):
        payload = await signup(client_factory())
        client = client_factory()

        response = await client.post("/api/signin", json={"usn": payload['usn'], "password": TEST_PASSWORD})

        assert response.status_code == 200
        assert response.json()['message'] == "Signed in successfully"
        assert response.json()['userName'] == payload['name']
        assert (await client.get("/api/me")).status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_usn_look_the_same(self, client_factory):
        payload = await signup(client_factory())
        client = client_factory()

        wrong = await client.post("/api/signin", json={"usn": payload['usn'], "password": "wrongpass"})
        unknown = await client.post("/api/signin", json={"usn": "1BM20XX999", "password": TEST_PASSWORD})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "Invalid USN or password"}

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        response = await client.post("/api/signin", json={"usn": "1BM23CS101"})

        assert response.status_code == 400
        assert response.json()['error'] == "USN and password are required"


class TestSession:

    @pytest.mark.asyncio
    async def test_protected_route_without_session(self, client):
        response = await client.get("/api/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Please sign in first"}

    @pytest.mark.asyncio
    async def test_forged_cookie_rejected(self, client):
        client.cookies.set("sessionId", "forged-token")

        response = await client.get("/api/events")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_signout(self, client):
        await signup(client)

        response = await client.post("/api/signout")

        assert response.status_code == 200
        assert response.json()['message'] == "Signed out successfully"
        assert (await client.get("/api/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_signout_invalidates_token_server_side(self, client_factory):
        client = client_factory()
        await signup(client)
        token = client.cookies.get("sessionId")

        await client.post("/api/signout")

        replay = client_factory()
        replay.cookies.set("sessionId", token)
        assert (await replay.get("/api/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_signout_without_session(self, client):
        response = await client.post("/api/signout")
        assert response.status_code == 200


class TestPasswordRecovery:

    GENERIC = "If an account with that email exists, a password reset link has been sent."

    @pytest.mark.asyncio
    async def test_forgot_password_known_and_unknown_look_the_same(self, client, email_service):
        payload = await signup(client)

        known = await client.post("/api/forgot-password", json={"email": payload['email']})
        unknown = await client.post("/api/forgot-password", json={"email": "ghost@bmsce.ac.in"})

        assert known.status_code == unknown.status_code == 200
        assert known.json()['message'] == unknown.json()['message'] == self.GENERIC
        assert len(email_service.sent) == 1

    @pytest.mark.asyncio
    async def test_forgot_password_requires_email(self, client):
        response = await client.post("/api/forgot-password", json={})

        assert response.status_code == 400
        assert response.json()['error'] == "Email is required"

    @pytest.mark.asyncio
    async def test_forgot_password_email_failure(self, client, email_service):
        payload = await signup(client)
        email_service.fail = True

        response = await client.post("/api/forgot-password", json={"email": payload['email']})

        assert response.status_code == 500
        assert response.json()['error'] == "Failed to send password reset email"

    @pytest.mark.asyncio
    async def test_reset_then_signin_with_new_password(self, client_factory, email_service):
        client = client_factory()
        payload = await signup(client)
        await client.post("/api/forgot-password", json={"email": payload['email']})
        token = email_service.sent[0]['token']

        response = await client.post("/api/reset-password", json={"token": token, "newPassword": "freshpass1"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Password has been reset successfully",
            "userName": payload['name'],
        }

        other = client_factory()
        old = await other.post("/api/signin", json={"usn": payload['usn'], "password": TEST_PASSWORD})
        new = await other.post("/api/signin", json={"usn": payload['usn'], "password": "freshpass1"})
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_token_single_use(self, client, email_service):
        payload = await signup(client)
        await client.post("/api/forgot-password", json={"email": payload['email']})
        token = email_service.sent[0]['token']

        await client.post("/api/reset-password", json={"token": token, "newPassword": "freshpass1"})
        response = await client.post("/api/reset-password", json={"token": token, "newPassword": "freshpass2"})

        assert response.status_code == 400
        assert response.json()['error'] == "Invalid or expired reset token"
