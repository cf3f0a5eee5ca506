import httpx
import pytest

from spanops.core.adapters.crudservice import HttpCrudServiceAdapter
from spanops.core.errors import VerificationMismatch
from spanops.core.verifier import CrudVerifier, parse_name_records


def test_run_passes_against_conforming_service(crud_app, crud_service):
    results = CrudVerifier(crud_service).run()

    assert [r.step for r in results] == [1, 2, 3, 4, 5, 6, 7]
    assert all(r.passed for r in results)

    requests = crud_app.requests
    assert [(m, p) for m, p, _ in requests] == [
        ("POST", "/createTable"),
        ("GET", "/listRows"),
        ("POST", "/addRow"),
        ("GET", "/listRows"),
        ("POST", "/deleteRow"),
        ("POST", "/deleteRow"),
        ("POST", "/dropTable"),
    ]
    assert requests[2][2] == "Bob"
    assert requests[5][2] == "nonexistent"


def test_delete_uses_uuid_captured_from_listing(crud_app, crud_service):
    CrudVerifier(crud_service).run()

    listed_after_insert = crud_app.listed_uuids[1]
    delete_bodies = [b for _, p, b in crud_app.requests if p == "/deleteRow"]
    assert len(listed_after_insert) == 1
    assert delete_bodies == [listed_after_insert[0], "nonexistent"]


def test_first_mismatch_aborts_remaining_steps(crud_app, crud_service):
    crud_app.overrides["/createTable"] = "table NAMES already exists"

    with pytest.raises(VerificationMismatch) as info:
        CrudVerifier(crud_service).run()

    assert info.value.step == 1
    assert info.value.observed == "table NAMES already exists"
    assert len(crud_app.requests) == 1
    assert [r.passed for r in info.value.results] == [False]


def test_non_empty_fresh_table_is_a_mismatch(crud_app, crud_service):
    crud_app.overrides["/listRows"] = '[{"name": "Alice", "uuid": "a-1"}]'

    with pytest.raises(VerificationMismatch) as info:
        CrudVerifier(crud_service).run()

    assert info.value.step == 2
    assert "Alice" in info.value.observed


def test_listing_must_hold_exactly_one_bob(crud_app, crud_service):
    verifier = CrudVerifier(crud_service)
    crud_app.overrides["/listRows"] = (
        '[{"name": "Bob", "uuid": "b-1"}, {"name": "Bob", "uuid": "b-2"}]'
    )

    with pytest.raises(VerificationMismatch) as info:
        verifier.expect_records(4, "/listRows", ["Bob"])

    assert info.value.step == 4


def test_empty_uuid_is_a_mismatch(crud_app, crud_service):
    crud_app.overrides["/listRows"] = '[{"name": "Bob", "uuid": ""}]'

    with pytest.raises(VerificationMismatch):
        CrudVerifier(crud_service).expect_records(4, "/listRows", ["Bob"])


def test_deleting_missing_row_must_not_claim_success(crud_app, crud_service):
    crud_app.overrides["/deleteRow"] = "row deleted successfully"

    with pytest.raises(VerificationMismatch) as info:
        CrudVerifier(crud_service).run()

    assert info.value.step == 6
    assert [r.passed for r in info.value.results] == [True] * 5 + [False]


def test_transport_error_is_reported_as_mismatch():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = httpx.Client(base_url="http://crud.test", transport=httpx.MockTransport(handler))
    service = HttpCrudServiceAdapter(client)

    with pytest.raises(VerificationMismatch, match="ReadTimeout") as info:
        CrudVerifier(service).run()

    assert info.value.step == 1


def test_adapter_sends_plain_text_bodies(crud_app, crud_service):
    response = crud_service.request("POST", "/addRow", "Bob")

    assert response.status_code == 200
    assert response.text == "row inserted successfully"
    assert crud_app.content_types == ["text/plain"]
    assert list(crud_app.rows.values()) == ["Bob"]


def test_adapter_applies_one_timeout_to_every_request():
    adapter = HttpCrudServiceAdapter.from_url("http://crud.test", 240)
    try:
        assert adapter.client.timeout.read == 240
        assert adapter.client.timeout.connect == 240
    finally:
        adapter.close()


@pytest.mark.parametrize(
    "text",
    ["not json", '{"name": "Bob"}', "[1, 2]", '[{"name": "Bob"}]'],
)
def test_parse_name_records_rejects_malformed_bodies(text: str):
    with pytest.raises(ValueError):
        parse_name_records(text)


def test_parse_name_records_reads_name_and_uuid():
    records = parse_name_records('[{"name": "Bob", "uuid": "b-1"}]')

    assert [(r.name, r.uuid) for r in records] == [("Bob", "b-1")]
