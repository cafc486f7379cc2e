import time
import unittest

import jwt
from bson import ObjectId
from fastapi.testclient import TestClient

from campuspilot.config import FIREBASE_JWKS_URL, Settings
from campuspilot.dependencies import get_identity_verifier, get_store, get_task_repository
from campuspilot.errors import StoreError
from campuspilot.main import create_application
from campuspilot.services.identity import IdentityVerifier
from campuspilot.tests.fakes import ClientFactory, make_store

SECRET = "api-test-secret-that-is-long-enough-for-hs256"
FRONTEND = "http://localhost:5173"


def bearer(uid="u1"):
    token = jwt.encode({"sub": uid, "exp": int(time.time()) + 3600}, SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.factory = ClientFactory()
        self.store = make_store(self.factory)
        settings = Settings(_env_file=None, cors_allowed_origins=[FRONTEND])
        self.app = create_application(settings)
        self.app.dependency_overrides[get_store] = lambda: self.store
        self.app.dependency_overrides[get_identity_verifier] = lambda: IdentityVerifier(
            FIREBASE_JWKS_URL, secret=SECRET
        )
        self.client = TestClient(self.app)
        self.headers = bearer()


class EndToEndScenarioTests(ApiTestCase):
    def test_campus_pilot_flow(self):
        first = self.client.post("/api/users", json={"uid": "u1"}, headers=self.headers)
        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["created"])
        generated_id = first.json()["userId"]

        again = self.client.post("/api/users", json={"uid": "u1"}, headers=self.headers)
        self.assertEqual(again.status_code, 200)
        self.assertEqual(again.json()["userId"], generated_id)
        self.assertFalse(again.json()["created"])
        self.assertEqual(again.json()["message"], "User already exists")

        score = {"uid": "u1", "subject": "math", "total": 100}
        resp = self.client.post(
            "/api/scores", json={**score, "score": 80, "date": "2025-01-01T09:00:00.000Z"}, headers=self.headers
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["average"], 80)

        resp = self.client.post(
            "/api/scores", json={**score, "score": 60, "date": "2025-01-02T09:00:00.000Z"}, headers=self.headers
        )
        self.assertEqual(resp.json()["average"], 70)

        resp = self.client.get("/api/scores/u1", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([s["score"] for s in body["scores"]], [60, 80])
        self.assertEqual(body["average"], 70)

        resp = self.client.put(f"/api/tasks/{ObjectId()}", json={"status": "done"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})
        self.assertEqual(self.client.get("/api/tasks", headers=self.headers).json(), [])

        resp = self.client.get("/api/users")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized: No token provided"})


class AuthGateTests(ApiTestCase):
    ROUTES = [
        ("post", "/api/users"),
        ("get", "/api/users"),
        ("get", f"/api/users/{ObjectId()}"),
        ("get", "/api/users/uid/u1"),
        ("post", "/api/transactions"),
        ("get", "/api/transactions/u1"),
        ("post", "/api/classes"),
        ("get", "/api/classes?uid=u1"),
        ("post", "/api/scores"),
        ("get", "/api/scores/u1"),
        ("post", "/api/tasks"),
        ("get", "/api/tasks"),
        ("put", f"/api/tasks/{ObjectId()}"),
        ("delete", f"/api/tasks/{ObjectId()}"),
    ]

    def test_every_route_requires_a_token(self):
        for method, path in self.ROUTES:
            with self.subTest(method=method, path=path):
                kwargs = {"json": {}} if method in ("post", "put") else {}
                resp = getattr(self.client, method)(path, **kwargs)
                self.assertEqual(resp.status_code, 401)

    def test_invalid_token(self):
        resp = self.client.get("/api/users", headers={"Authorization": "Bearer nonsense"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized: Invalid token"})

    def test_non_bearer_scheme(self):
        resp = self.client.get("/api/users", headers={"Authorization": "Basic dXNlcjpwdw=="})
        self.assertEqual(resp.status_code, 401)

    def test_auth_checked_before_store(self):
        self.factory.alive = False
        resp = self.client.get("/api/tasks")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self.factory.clients, [])


class UserApiTests(ApiTestCase):
    def test_lookups(self):
        created = self.client.post(
            "/api/users", json={"uid": "u9", "displayName": "Nine"}, headers=self.headers
        ).json()
        self.assertEqual(created["message"], "User created")
        user_id = created["userId"]

        by_id = self.client.get(f"/api/users/{user_id}", headers=self.headers)
        self.assertEqual(by_id.status_code, 200)
        self.assertEqual(by_id.json()["_id"], user_id)
        self.assertEqual(by_id.json()["displayName"], "Nine")

        by_uid = self.client.get("/api/users/uid/u9", headers=self.headers)
        self.assertEqual(by_uid.json()["_id"], user_id)

        listed = self.client.get("/api/users", headers=self.headers).json()
        self.assertEqual([u["uid"] for u in listed], ["u9"])

    def test_missing_uid_is_400(self):
        resp = self.client.post("/api/users", json={"email": "x@y.z"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_not_found_and_malformed_ids(self):
        self.assertEqual(self.client.get(f"/api/users/{ObjectId()}", headers=self.headers).status_code, 404)
        self.assertEqual(self.client.get("/api/users/uid/ghost", headers=self.headers).status_code, 404)
        resp = self.client.get("/api/users/not-an-object-id", headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Invalid id", resp.json()["error"])


class TransactionApiTests(ApiTestCase):
    def test_create_and_list_newest_first(self):
        for amount, date in ((10, "2025-02-01T00:00:00.000Z"), (20, "2025-03-01T00:00:00.000Z"),
                             (5, "2025-01-01T00:00:00.000Z")):
            resp = self.client.post(
                "/api/transactions",
                json={"uid": "u1", "type": "expense", "category": "food", "amount": str(amount), "date": date},
                headers=self.headers,
            )
            self.assertEqual(resp.status_code, 200)
            self.assertTrue(resp.json()["success"])
            self.assertEqual(resp.json()["transaction"]["amount"], amount)

        listed = self.client.get("/api/transactions/u1", headers=self.headers).json()
        self.assertEqual([t["amount"] for t in listed], [20, 10, 5])

    def test_non_numeric_amount_serializes_as_null(self):
        resp = self.client.post("/api/transactions", json={"uid": "u1", "amount": "abc"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["transaction"]["amount"])

    def test_out_of_range_amount_is_stored(self):
        resp = self.client.post("/api/transactions", json={"uid": "u1", "amount": "1e20"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["transaction"]["amount"], 1e20)
        self.assertNotIn("note", resp.json()["transaction"])

        resp = self.client.post("/api/transactions", json={"uid": "u1", "amount": 2**70}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(self.client.get("/api/transactions/u1", headers=self.headers).json()), 2)

    def test_missing_owner(self):
        resp = self.client.post("/api/transactions", json={"amount": 5}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "User UID required"})


class ClassApiTests(ApiTestCase):
    def test_list_annotates_string_id(self):
        created = self.client.post(
            "/api/classes", json={"uid": "u1", "name": "Biology"}, headers=self.headers
        ).json()["class"]
        listed = self.client.get("/api/classes", params={"uid": "u1"}, headers=self.headers).json()

        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]["id"], created["id"])
        self.assertEqual(listed[0]["id"], listed[0]["_id"])
        self.assertEqual(listed[0]["name"], "Biology")

    def test_list_without_owner_is_400(self):
        resp = self.client.get("/api/classes", headers=self.headers)
        self.assertEqual(resp.status_code, 400)


class ScoreApiTests(ApiTestCase):
    def test_empty_history(self):
        resp = self.client.get("/api/scores/nobody", headers=self.headers)
        self.assertEqual(resp.json(), {"scores": [], "average": 0})

    def test_non_numeric_score_gives_null_average(self):
        score = {"uid": "u1", "subject": "math", "total": 100}
        self.client.post("/api/scores", json={**score, "score": 90}, headers=self.headers)
        resp = self.client.post("/api/scores", json={**score, "score": "n/a"}, headers=self.headers)

        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["average"])
        body = self.client.get("/api/scores/u1", headers=self.headers).json()
        self.assertIsNone(body["average"])
        self.assertEqual(sorted(s["score"] is None for s in body["scores"]), [False, True])

    def test_missing_required_fields(self):
        resp = self.client.post("/api/scores", json={"uid": "u1", "subject": "math"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("total", resp.json()["error"])


class TaskApiTests(ApiTestCase):
    def test_crud(self):
        task = self.client.post(
            "/api/tasks", json={"uid": "u1", "title": "Read ch. 3", "status": "todo"}, headers=self.headers
        ).json()["task"]

        resp = self.client.put(f"/api/tasks/{task['id']}", json={"status": "done"}, headers=self.headers)
        self.assertEqual(resp.json(), {"success": True})
        (stored,) = self.client.get("/api/tasks", headers=self.headers).json()
        self.assertEqual(stored["status"], "done")
        self.assertEqual(stored["title"], "Read ch. 3")
        self.assertEqual(stored["id"], task["id"])

        resp = self.client.delete(f"/api/tasks/{task['id']}", headers=self.headers)
        self.assertEqual(resp.json(), {"success": True})
        self.assertEqual(self.client.get("/api/tasks", headers=self.headers).json(), [])

    def test_delete_unknown_id_succeeds(self):
        resp = self.client.delete(f"/api/tasks/{ObjectId()}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})

    def test_malformed_ids(self):
        resp = self.client.put("/api/tasks/123", json={"status": "x"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.delete("/api/tasks/123", headers=self.headers)
        self.assertEqual(resp.status_code, 400)


class ErrorHandlingTests(ApiTestCase):
    def test_store_unreachable_is_500_with_message(self):
        self.factory.alive = False
        resp = self.client.get("/api/tasks", headers=self.headers)
        self.assertEqual(resp.status_code, 500)
        self.assertIn("fake server unreachable", resp.json()["error"])

    def test_malformed_json_is_400(self):
        resp = self.client.post(
            "/api/tasks",
            content="{not json",
            headers={**self.headers, "Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_unexpected_error_is_500_json(self):
        class BrokenTaskRepository:
            async def list_all(self):
                raise RuntimeError("task listing exploded")

        self.app.dependency_overrides[get_task_repository] = BrokenTaskRepository
        client = TestClient(self.app, raise_server_exceptions=False)

        resp = client.get("/api/tasks", headers=self.headers)

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "task listing exploded"})

    def test_malformed_json_without_token_is_401(self):
        resp = self.client.post("/api/tasks", content="{not json", headers={"Content-Type": "application/json"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized: No token provided"})

    def test_malformed_json_with_invalid_token_is_401(self):
        resp = self.client.post(
            "/api/scores",
            content="[1,",
            headers={"Authorization": "Bearer nonsense", "Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized: Invalid token"})


class LifespanTests(unittest.TestCase):
    def _app(self, factory):
        store = make_store(factory)
        settings = Settings(_env_file=None, mongodb_connect_on_startup=True)
        app = create_application(settings)
        app.dependency_overrides[get_store] = lambda: store
        return app, store

    def test_connect_on_startup_failure_aborts_startup(self):
        factory = ClientFactory(alive=False)
        app, store = self._app(factory)

        with self.assertRaises(StoreError):
            with TestClient(app):
                pass

        self.assertFalse(store.connected)
        self.assertTrue(factory.clients[0].closed)

    def test_connect_on_startup_and_close_on_shutdown(self):
        factory = ClientFactory()
        app, store = self._app(factory)

        with TestClient(app):
            self.assertTrue(store.connected)
            self.assertEqual(len(factory.clients), 1)

        self.assertFalse(store.connected)
        self.assertTrue(factory.clients[0].closed)

    def test_lazy_by_default(self):
        factory = ClientFactory()
        store = make_store(factory)
        app = create_application(Settings(_env_file=None))
        app.dependency_overrides[get_store] = lambda: store

        with TestClient(app):
            self.assertEqual(factory.clients, [])


class OriginAllowListTests(ApiTestCase):
    def test_listed_origin_gets_cors_headers(self):
        resp = self.client.get("/api/tasks", headers={**self.headers, "Origin": FRONTEND})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["access-control-allow-origin"], FRONTEND)

    def test_unlisted_origin_rejected(self):
        resp = self.client.get("/api/tasks", headers={**self.headers, "Origin": "https://evil.example"})
        self.assertEqual(resp.status_code, 403)

    def test_unlisted_origin_preflight_rejected(self):
        resp = self.client.options(
            "/api/tasks",
            headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
        )
        self.assertEqual(resp.status_code, 403)

    def test_no_origin_allowed(self):
        resp = self.client.get("/api/tasks", headers=self.headers)
        self.assertEqual(resp.status_code, 200)


if __name__ == "__main__":
    unittest.main()
