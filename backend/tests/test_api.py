import httpx
import pytest
from fastapi.testclient import TestClient

from roomcheck.core.config import get_settings
from roomcheck.core.exceptions import ProviderError
from roomcheck.core.security import AuthenticatedUser, get_current_user
from roomcheck.main import create_app
from roomcheck.models.collections import COLLECTION_INSPECTIONS, COLLECTION_ROOMS, room_comparisons_path
from roomcheck.services.document_store import get_document_store
from roomcheck.services.identity import FirebaseIdentityClient, get_identity_client
from roomcheck.services.notifications import get_report_service
from roomcheck.services.uploads import get_uploader
from roomcheck.services.vision import get_vision_client
from tests.conftest import OWNER, FakeVision

JPEG = ("c.jpg", b"\xff\xd8\xff", "image/jpeg")


@pytest.fixture
def app(store, uploader, vision, report_service, settings):
    app = create_app(settings, validate_env=False)
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_uploader] = lambda: uploader
    app.dependency_overrides[get_vision_client] = lambda: vision
    app.dependency_overrides[get_report_service] = lambda: report_service
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(uid=OWNER, email="owner@example.com")
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_owner_routes_require_token(app):
    app.dependency_overrides.pop(get_current_user)
    response = TestClient(app).get("/v1/homes")

    assert response.status_code in (401, 403)


def test_me(client):
    assert client.get("/v1/auth/me").json()["uid"] == OWNER


def test_create_home_selects_it(client, flat_2b):
    response = client.post("/v1/homes", json={"name": "Cottage", "address": "Lane 1"})

    assert response.status_code == 201
    body = response.json()
    assert [h["name"] for h in body["homes"]] == ["Flat 2B", "Cottage"]
    assert body["selected_home_id"] == body["homes"][1]["id"]


def test_unknown_selection_falls_back(client, flat_2b):
    body = client.get("/v1/homes", params={"selected_home_id": "gone"}).json()

    assert body["selected_home_id"] == "home-1"


def test_delete_home_not_supported(client, flat_2b):
    assert client.delete("/v1/homes/home-1").status_code == 501
    assert client.delete("/v1/homes/missing").status_code == 404


def test_create_room_multipart(client, flat_2b):
    response = client.post(
        "/v1/homes/home-1/rooms",
        data={"name": "Lounge"},
        files=[("files", ("l1.jpg", b"\xff", "image/jpeg")), ("files", ("l2.jpg", b"\xff", "image/jpeg"))],
    )

    assert response.status_code == 201
    room = response.json()
    assert room["reference_images"] == ["https://cdn/l1.jpg", "https://cdn/l2.jpg"]
    assert room["initial_item_list"] == "Furniture: table"


def test_create_room_without_files(client, store, flat_2b):
    response = client.post("/v1/homes/home-1/rooms", data={"name": "Lounge"})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidInput"
    assert len(store.collections[COLLECTION_ROOMS]) == 2


def test_list_rooms_in_walkthrough_order(client, flat_2b):
    rooms = client.get("/v1/homes/home-1/rooms").json()

    assert [r["name"] for r in rooms] == ["Kitchen", "Bathroom"]


def test_adhoc_compare(client, flat_2b):
    response = client.post("/v1/rooms/room-kitchen/compare", files=[("files", JPEG)])

    assert response.status_code == 200
    assert response.json()["ai_comparison_result"] == "Missing: kettle on counter."


def test_issue_list_and_deactivate_inspection(client, flat_2b):
    issued = client.post("/v1/homes/home-1/inspections").json()
    inspection_id = issued["inspection"]["id"]
    assert issued["url"] == f"https://rooms.example.com/inspect/{inspection_id}"

    listed = client.get("/v1/homes/home-1/inspections").json()
    assert {i["id"] for i in listed} == {"insp-1", inspection_id}

    response = client.post(f"/v1/inspections/{inspection_id}/deactivate")
    assert response.json()["status"] == "inactive"
    assert client.post(f"/v1/inspections/{inspection_id}/deactivate").status_code == 409

    # a revoked link turns the tenant away
    assert client.get(f"/v1/inspect/{inspection_id}").status_code == 409


def test_invite_tenant(client, report_service, flat_2b):
    response = client.post("/v1/inspections/insp-1/invite", json={"email": "tenant@example.com"})

    assert response.status_code == 200
    assert response.json()["tenant_email"] == "tenant@example.com"
    assert report_service.emails[0]["email"] == "tenant@example.com"


def test_invite_rejects_bad_email(client, flat_2b):
    assert client.post("/v1/inspections/insp-1/invite", json={"email": "not-an-email"}).status_code == 422


def test_tenant_walkthrough_end_to_end(client, store, vision, report_service, flat_2b):
    overview = client.get("/v1/inspect/insp-1").json()
    assert [r["name"] for r in overview["rooms"]] == ["Kitchen", "Bathroom"]
    assert overview["first_room_path"] == "/inspect/insp-1/room/0"
    assert not overview["has_any_comparison"]

    room = client.get("/v1/inspect/insp-1/room/0").json()
    assert room["room"]["reference_images"] == ["a.jpg", "b.jpg"]
    assert room["latest_event"] is None
    assert "initial_item_list" not in room["room"]

    result = client.post("/v1/inspect/insp-1/room/0/compare", files=[("files", JPEG)]).json()
    assert result["latest_event"]["ai_comparison_result"] == "Missing: kettle on counter."
    assert result["latest_event"]["uploaded_image_urls"] == ["https://cdn/c.jpg"]
    assert vision.compare_calls == [(["a.jpg", "b.jpg"], ["https://cdn/c.jpg"])]

    # resuming the room shows the saved result
    assert client.get("/v1/inspect/insp-1/room/0").json()["latest_event"] == result["latest_event"]

    nav = client.post("/v1/inspect/insp-1/room/0/next").json()
    assert nav == {"inspection_id": "insp-1", "room_index": 1, "completed": False, "path": "/inspect/insp-1/room/1"}

    nav = client.post("/v1/inspect/insp-1/room/1/next").json()
    assert nav["completed"]
    assert store.raw(COLLECTION_INSPECTIONS, "insp-1")["status"] == "completed"

    completion = client.get(nav["path"].replace("/inspect", "/v1/inspect", 1))
    assert completion.status_code == 200
    assert completion.json()["status"] == "completed"
    assert report_service.reports == ["insp-1"]

    # submitted inspections cannot be walked again
    assert client.post("/v1/inspect/insp-1/submit").status_code == 409


def test_next_on_last_room_without_comparisons_is_rejected(client, store, flat_2b):
    response = client.post("/v1/inspect/insp-1/room/1/next")

    assert response.status_code == 409
    assert store.raw(COLLECTION_INSPECTIONS, "insp-1")["status"] == "active"


def test_tenant_errors(client, flat_2b):
    assert client.get("/v1/inspect/missing").json()["error"] == "NotFound"
    assert client.get("/v1/inspect/insp-1/room/5").status_code == 404
    assert client.get("/v1/inspect/insp-1/complete").status_code == 409

    response = client.post(
        "/v1/inspect/insp-1/room/0/compare",
        files=[("files", ("notes.txt", b"hello", "text/plain"))],
    )
    assert response.status_code == 400


def test_vision_failure_keeps_nothing(app, store, flat_2b):
    app.dependency_overrides[get_vision_client] = lambda: FakeVision(error=ProviderError("Rate limit reached"))
    response = TestClient(app).post("/v1/inspect/insp-1/room/0/compare", files=[("files", JPEG)])

    assert response.status_code == 502
    assert response.json() == {"detail": "Rate limit reached", "error": "ProviderError"}
    assert store.raw(room_comparisons_path("insp-1"), "room-kitchen") is None


def test_inspection_detail_and_report(client, flat_2b):
    client.post("/v1/inspect/insp-1/room/0/compare", files=[("files", JPEG)])

    detail = client.get("/v1/inspections/insp-1").json()
    [comparison] = detail["comparisons"]
    assert comparison["room_id"] == "room-kitchen"
    assert comparison["latest_event"]["ai_comparison_result"] == "Missing: kettle on counter."

    report = client.get("/v1/inspections/insp-1/report.pdf")
    assert report.headers["content-type"] == "application/pdf"
    assert report.content.startswith(b"%PDF")


def test_sign_in_maps_firebase_rejection(app):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "INVALID_PASSWORD"}})

    app.dependency_overrides[get_identity_client] = lambda: FirebaseIdentityClient(
        "web-key", transport=httpx.MockTransport(handler)
    )
    response = TestClient(app).post("/v1/auth/sign-in", json={"email": "owner@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["error"] == "AuthFailed"


def test_sign_in_gateway_html_page_maps_to_auth_failed(app):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    app.dependency_overrides[get_identity_client] = lambda: FirebaseIdentityClient(
        "web-key", transport=httpx.MockTransport(handler)
    )
    response = TestClient(app).post("/v1/auth/sign-in", json={"email": "owner@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Authentication failed.", "error": "AuthFailed"}
