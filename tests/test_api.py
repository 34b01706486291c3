"""HTTP tests against create_app() with in-memory SQLite and a temporary upload directory."""

import tempfile
import unittest
from datetime import UTC, datetime, timedelta
from pathlib import Path

from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.main import create_app
from storefront.models import Base, User

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128
GIF_BYTES = b"GIF89a" + b"\x00" * 64


class ApiTestCase(unittest.TestCase):
    """Fresh app, database and upload root per test."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.upload_root = Path(self._tmp.name) / "uploads"
        self.settings = Settings(
            _env_file=None,
            DATABASE_URL="sqlite://",
            UPLOAD_DIR=str(self.upload_root),
            JWT_SECRET="api-test-secret-long-enough-for-hs256-signing",
            BCRYPT_ROUNDS=4,
        )
        self.app = create_app(self.settings)
        Base.metadata.create_all(self.app.state.engine)
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        self.app.state.engine.dispose()
        self._tmp.cleanup()

    def register(
        self,
        email: str = "ada@example.com",
        password: str = "s3cret-pass",
        name: str = "Ada",
    ) -> dict:
        resp = self.client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def create_product(self, token: str, **overrides: object) -> dict:
        body = {"name": "A", "description": "First product", "price": 10, "quantity": 5}
        body.update(overrides)
        resp = self.client.post("/products", json=body, headers=self.auth_headers(token))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["product"]

    def count_users(self, email: str) -> int:
        db = self.app.state.session_factory()
        try:
            return db.query(User).filter(User.email == email).count()
        finally:
            db.close()


class TestAuthFlow(ApiTestCase):
    """Register, login and token handling."""

    def test_register_then_login(self) -> None:
        registered = self.register()
        self.assertEqual(registered["user"]["email"], "ada@example.com")
        self.assertIsNone(registered["user"]["imagePath"])
        self.assertNotIn("password", registered["user"])
        self.assertNotIn("passwordHash", registered["user"])

        resp = self.client.post(
            "/auth/login",
            json={"email": "ada@example.com", "password": "s3cret-pass"},
        )
        self.assertEqual(resp.status_code, 200)
        token = resp.json()["token"]
        check = self.app.state.token_issuer.verify(token)
        self.assertTrue(check.is_valid)
        self.assertEqual(check.subject_id, registered["user"]["id"])

    def test_login_wrong_password(self) -> None:
        self.register()
        resp = self.client.post(
            "/auth/login",
            json={"email": "ada@example.com", "password": "not-the-pass"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid credentials")

    def test_login_unknown_email(self) -> None:
        resp = self.client.post(
            "/auth/login",
            json={"email": "ghost@example.com", "password": "whatever"},
        )
        self.assertEqual(resp.status_code, 401)

    def test_duplicate_email_conflict(self) -> None:
        self.register()
        resp = self.client.post(
            "/auth/register",
            json={"name": "Other", "email": "ada@example.com", "password": "another-pass"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Email already registered")
        self.assertEqual(self.count_users("ada@example.com"), 1)

    def test_register_validation_errors_are_400_without_input_echo(self) -> None:
        resp = self.client.post(
            "/auth/register",
            json={"name": "Ada", "email": "not-an-email", "password": "abc"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertNotIn("abc", resp.text)
        fields = {tuple(e["loc"])[-1] for e in resp.json()["detail"]}
        self.assertEqual(fields, {"email", "password"})

    def test_password_over_72_bytes_rejected(self) -> None:
        for password in ("a" * 72 + "-real-secret", "é" * 37):
            with self.subTest(length=len(password)):
                resp = self.client.post(
                    "/auth/register",
                    json={"name": "Ada", "email": "ada@example.com", "password": password},
                )
                self.assertEqual(resp.status_code, 400)
                self.assertNotIn(password, resp.text)
        self.assertEqual(self.count_users("ada@example.com"), 0)

    def test_login_shared_72_byte_prefix_does_not_match(self) -> None:
        self.register(password="a" * 72)
        for password in ("a" * 71 + "b", "a" * 72 + "-wrong"):
            with self.subTest(length=len(password)):
                resp = self.client.post(
                    "/auth/login",
                    json={"email": "ada@example.com", "password": password},
                )
                self.assertIn(resp.status_code, (400, 401))
                self.assertNotIn("token", resp.json())

    def test_register_blank_name(self) -> None:
        resp = self.client.post(
            "/auth/register",
            json={"name": "   ", "email": "ada@example.com", "password": "s3cret-pass"},
        )
        self.assertEqual(resp.status_code, 400)


class TestAccessControl(ApiTestCase):
    """Protected routes reject missing, invalid and expired tokens."""

    def test_me_without_token(self) -> None:
        resp = self.client.get("/users/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_me_with_garbage_token(self) -> None:
        resp = self.client.get("/users/me", headers=self.auth_headers("not.a.jwt"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid token")

    def test_me_with_expired_token(self) -> None:
        user_id = self.register()["user"]["id"]
        expired = self.app.state.token_issuer.issue(
            user_id, now=datetime.now(UTC) - timedelta(days=2)
        )
        resp = self.client.get("/users/me", headers=self.auth_headers(expired))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Token expired")

    def test_me_with_valid_token(self) -> None:
        token = self.register()["token"]
        resp = self.client.get("/users/me", headers=self.auth_headers(token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["name"], "Ada")

    def test_token_for_deleted_user(self) -> None:
        first = self.register()
        second = self.register(email="grace@example.com", name="Grace")
        resp = self.client.delete(
            f"/admin/users/{first['user']['id']}",
            headers=self.auth_headers(second["token"]),
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get("/users/me", headers=self.auth_headers(first["token"]))
        self.assertEqual(resp.status_code, 401)

    def test_protected_product_routes_require_auth(self) -> None:
        for method, path in (
            ("post", "/products"),
            ("put", "/products/1"),
            ("delete", "/products/1"),
            ("post", "/products/1/image"),
            ("get", "/admin/users"),
            ("get", "/admin/users/1"),
            ("delete", "/admin/users/1"),
        ):
            with self.subTest(method=method, path=path):
                resp = getattr(self.client, method)(path)
                self.assertEqual(resp.status_code, 401)

    def test_public_product_routes(self) -> None:
        self.assertEqual(self.client.get("/products").status_code, 200)
        self.assertEqual(self.client.get("/products/999").status_code, 404)


class TestProfile(ApiTestCase):
    """PUT /users/me and avatar upload."""

    def setUp(self) -> None:
        super().setUp()
        self.token = self.register()["token"]
        self.headers = self.auth_headers(self.token)

    def test_partial_update_and_password_change(self) -> None:
        resp = self.client.put("/users/me", json={"name": "Ada L."}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["name"], "Ada L.")
        self.assertEqual(resp.json()["user"]["email"], "ada@example.com")

        resp = self.client.put("/users/me", json={"password": "new-s3cret"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        old = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"})
        new = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "new-s3cret"})
        self.assertEqual(old.status_code, 401)
        self.assertEqual(new.status_code, 200)

    def test_password_update_over_72_bytes_rejected(self) -> None:
        resp = self.client.put("/users/me", json={"password": "b" * 73}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.put("/users/me", json={"password": "ü" * 40}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        login = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"})
        self.assertEqual(login.status_code, 200)

    def test_empty_password_keeps_current(self) -> None:
        resp = self.client.put("/users/me", json={"password": ""}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        login = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"})
        self.assertEqual(login.status_code, 200)

    def test_email_taken_by_other_user(self) -> None:
        self.register(email="grace@example.com", name="Grace")
        resp = self.client.put("/users/me", json={"email": "grace@example.com"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Email already registered")

    def test_null_name_rejected(self) -> None:
        resp = self.client.put("/users/me", json={"name": None}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_avatar_upload_and_replace(self) -> None:
        resp = self.client.post(
            "/users/me/image",
            files={"image": ("avatar.png", PNG_BYTES, "image/png")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        first_path = resp.json()["user"]["imagePath"]
        self.assertTrue(first_path.startswith("/uploads/users/"))
        served = self.client.get(first_path)
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, PNG_BYTES)

        resp = self.client.post(
            "/users/me/image",
            files={"image": ("avatar.gif", GIF_BYTES, "image/gif")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        second_path = resp.json()["user"]["imagePath"]
        self.assertNotEqual(first_path, second_path)
        self.assertFalse(self.app.state.file_store.resolve(first_path).exists())
        self.assertTrue(self.app.state.file_store.resolve(second_path).exists())

    def test_avatar_wrong_type(self) -> None:
        resp = self.client.post(
            "/users/me/image",
            files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(list((self.upload_root / "users").iterdir()), [])

    def test_avatar_missing_file(self) -> None:
        resp = self.client.post("/users/me/image", headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "No file uploaded")


class TestProducts(ApiTestCase):
    """Product CRUD, partial updates and image lifecycle."""

    def setUp(self) -> None:
        super().setUp()
        self.token = self.register()["token"]
        self.headers = self.auth_headers(self.token)

    def test_create_and_read(self) -> None:
        product = self.create_product(self.token)
        self.assertEqual(product["name"], "A")
        self.assertEqual(product["price"], 10)
        self.assertIn("createdAt", product)

        listed = self.client.get("/products").json()["products"]
        self.assertEqual([p["id"] for p in listed], [product["id"]])
        fetched = self.client.get(f"/products/{product['id']}").json()["product"]
        self.assertEqual(fetched["description"], "First product")

    def test_create_validation(self) -> None:
        for body in (
            {"name": "", "description": "d", "price": 1, "quantity": 1},
            {"name": "n", "description": "d", "price": -1, "quantity": 1},
            {"name": "n", "description": "d", "price": 1, "quantity": -5},
            {"name": "n", "price": 1, "quantity": 1},
        ):
            with self.subTest(body=body):
                resp = self.client.post("/products", json=body, headers=self.headers)
                self.assertEqual(resp.status_code, 400)

    def test_partial_update(self) -> None:
        product_id = self.create_product(self.token, name="A", price=10)["id"]

        resp = self.client.put(f"/products/{product_id}", json={"price": 20}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["product"]["name"], "A")
        self.assertEqual(resp.json()["product"]["price"], 20)

        resp = self.client.put(f"/products/{product_id}", json={"name": "B"}, headers=self.headers)
        self.assertEqual(resp.json()["product"]["price"], 20)
        self.assertEqual(resp.json()["product"]["name"], "B")

    def test_explicit_zero_is_applied(self) -> None:
        product_id = self.create_product(self.token, quantity=5)["id"]
        resp = self.client.put(f"/products/{product_id}", json={"quantity": 0}, headers=self.headers)
        self.assertEqual(resp.json()["product"]["quantity"], 0)

    def test_update_rejects_negative_and_null(self) -> None:
        product_id = self.create_product(self.token)["id"]
        for body in ({"price": -1}, {"price": None}, {"description": ""}):
            with self.subTest(body=body):
                resp = self.client.put(f"/products/{product_id}", json=body, headers=self.headers)
                self.assertEqual(resp.status_code, 400)

    def test_update_missing_product(self) -> None:
        resp = self.client.put("/products/999", json={"price": 1}, headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_non_integer_id(self) -> None:
        self.assertEqual(self.client.get("/products/abc").status_code, 400)

    def test_image_upload_then_delete_removes_file(self) -> None:
        product_id = self.create_product(self.token)["id"]
        resp = self.client.post(
            f"/products/{product_id}/image",
            files={"image": ("photo.png", PNG_BYTES, "image/png")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        image_path = resp.json()["product"]["imagePath"]
        on_disk = self.app.state.file_store.resolve(image_path)
        self.assertTrue(on_disk.exists())

        resp = self.client.delete(f"/products/{product_id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Product deleted successfully")
        self.assertFalse(on_disk.exists())
        self.assertEqual(self.client.get(f"/products/{product_id}").status_code, 404)

    def test_pdf_rejected_for_product(self) -> None:
        product_id = self.create_product(self.token)["id"]
        resp = self.client.post(
            f"/products/{product_id}/image",
            files={"image": ("catalog.pdf", b"%PDF-1.4", "application/pdf")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Invalid file type", resp.json()["detail"])

    def test_image_for_missing_product(self) -> None:
        resp = self.client.post(
            "/products/999/image",
            files={"image": ("photo.png", PNG_BYTES, "image/png")},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 404)

    def test_delete_without_image(self) -> None:
        product_id = self.create_product(self.token)["id"]
        resp = self.client.delete(f"/products/{product_id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)


class TestAdmin(ApiTestCase):
    """Admin routes need authentication only."""

    def test_list_get_delete(self) -> None:
        ada = self.register()
        grace = self.register(email="grace@example.com", name="Grace")
        headers = self.auth_headers(ada["token"])

        users = self.client.get("/admin/users", headers=headers).json()["users"]
        self.assertEqual([u["email"] for u in users], ["ada@example.com", "grace@example.com"])
        for u in users:
            self.assertNotIn("passwordHash", u)

        resp = self.client.get(f"/admin/users/{grace['user']['id']}", headers=headers)
        self.assertEqual(resp.json()["user"]["name"], "Grace")

        resp = self.client.delete(f"/admin/users/{grace['user']['id']}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "User deleted successfully")
        self.assertEqual(self.client.get(f"/admin/users/{grace['user']['id']}", headers=headers).status_code, 404)

    def test_delete_user_removes_avatar(self) -> None:
        ada = self.register()
        grace = self.register(email="grace@example.com", name="Grace")
        resp = self.client.post(
            "/users/me/image",
            files={"image": ("g.jpg", b"\xff\xd8\xff" + b"\x00" * 32, "image/jpeg")},
            headers=self.auth_headers(grace["token"]),
        )
        avatar = self.app.state.file_store.resolve(resp.json()["user"]["imagePath"])
        self.assertTrue(avatar.exists())

        resp = self.client.delete(
            f"/admin/users/{grace['user']['id']}",
            headers=self.auth_headers(ada["token"]),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(avatar.exists())

    def test_delete_missing_user(self) -> None:
        token = self.register()["token"]
        resp = self.client.delete("/admin/users/999", headers=self.auth_headers(token))
        self.assertEqual(resp.status_code, 404)


class TestHealth(ApiTestCase):
    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok", "version": "0.1.0", "environment": "dev", "database": "connected"})


if __name__ == "__main__":
    unittest.main()
