from app.main import app

READ_DOCS = {
    "sid": "ReadDocs",
    "effect": "Allow",
    "actions": ["documents:GetDocument", "documents:ListDocuments"],
    "resources": ["urn:revet:documents::document/*"],
}

SCOPED = {
    "sid": None,
    "effect": "Deny",
    "actions": ["documents:DeleteDocument"],
    "resources": ["*"],
    "conditions": {"StringEquals": {"documents:Classification": "restricted"}},
}


async def _create(client, name="readers", statements=None):
    res = await client.post(
        "/admin/policies",
        json={"name": name, "description": "Read-only", "statements": statements or [READ_DOCS]},
    )
    assert res.status_code == 200, res.text
    return res.json()


async def test_create_and_get_policy(client):
    created = await _create(client, statements=[READ_DOCS, SCOPED])
    assert created["version"] == "1.0"
    assert created["statements"][1]["conditions"] == SCOPED["conditions"]
    assert "conditions" not in created["statements"][0]

    res = await client.get(f"/admin/policies/{created['id']}")
    assert res.status_code == 200
    assert res.json()["statements"] == created["statements"]


async def test_create_requires_name(client):
    res = await client.post("/admin/policies", json={"name": "  ", "statements": [READ_DOCS]})
    assert res.status_code == 400


async def test_create_rejects_invalid_statements(client):
    bad = dict(READ_DOCS, actions=[])
    res = await client.post("/admin/policies", json={"name": "broken", "statements": [READ_DOCS, bad]})
    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail["kind"] == "validation"
    assert detail["statement_index"] == 1
    assert detail["field"] == "actions"
    assert detail["message"] == "Statement 2 must have at least one action"

    res = await client.post("/admin/policies", json={"name": "broken", "statements": READ_DOCS})
    assert res.status_code == 422
    assert res.json()["detail"]["kind"] == "shape"

    listed = await client.get("/admin/policies")
    assert listed.json()["items"] == []


async def test_duplicate_name_conflicts(client):
    await _create(client)
    res = await client.post("/admin/policies", json={"name": "readers", "statements": [READ_DOCS]})
    assert res.status_code == 409


async def test_list_sorted_by_name(client):
    await _create(client, name="writers")
    await _create(client, name="admins")
    res = await client.get("/admin/policies")
    assert [p["name"] for p in res.json()["items"]] == ["admins", "writers"]


async def test_replace_swaps_whole_statement_list(client):
    created = await _create(client, statements=[READ_DOCS, SCOPED])
    res = await client.put(
        f"/admin/policies/{created['id']}",
        json={"name": "readers", "version": "1.1", "statements": [SCOPED]},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["version"] == "1.1"
    assert body["statements"] == [SCOPED]
    assert body["description"] is None


async def test_replace_with_invalid_statements_keeps_stored_policy(client):
    created = await _create(client)
    res = await client.put(
        f"/admin/policies/{created['id']}",
        json={"name": "readers", "statements": [dict(READ_DOCS, effect="Maybe")]},
    )
    assert res.status_code == 422
    assert res.json()["detail"]["field"] == "effect"

    res = await client.get(f"/admin/policies/{created['id']}")
    assert res.json()["statements"] == created["statements"]


async def test_missing_policy(client):
    assert (await client.get("/admin/policies/nope")).status_code == 404
    assert (await client.put("/admin/policies/nope", json={"name": "x", "statements": []})).status_code == 404
    assert (await client.delete("/admin/policies/nope")).status_code == 404


async def test_validate_endpoint(client):
    res = await client.post("/admin/policies/statements/validate", json={"text": "[{"})
    assert res.status_code == 200
    assert res.json()["kind"] == "shape"
    assert res.json()["message"] == "Invalid JSON syntax"

    res = await client.post(
        "/admin/policies/statements/validate",
        json={"text": '[{"effect": "Allow", "actions": ["*"], "resources": []}]'},
    )
    assert res.json()["kind"] == "validation"
    assert res.json()["field"] == "resources"

    res = await client.post(
        "/admin/policies/statements/validate",
        json={"text": '[{"effect": "Allow", "actions": ["*"], "resources": ["*"]}]'},
    )
    assert res.json() == {
        "kind": "ok",
        "statements": [{"sid": None, "effect": "Allow", "actions": ["*"], "resources": ["*"]}],
    }


async def test_validate_endpoint_survives_deep_nesting(client):
    text = '[{"effect": "Allow", "actions": ["*"], "resources": ["*"], "conditions": ' + "[" * 100000 + "]" * 100000 + "}]"
    res = await client.post("/admin/policies/statements/validate", json={"text": text})
    assert res.status_code == 200
    assert res.json()["kind"] == "shape"


async def test_attach_list_detach(client):
    policy = await _create(client)
    url = f"/admin/policies/{policy['id']}/attachments"

    res = await client.post(url, json={"principal_urn": "urn:revet:iam::group/g1"})
    assert res.status_code == 200
    attachment = res.json()
    assert attachment["principal_type"] == "Group"

    assert (await client.post(url, json={"principal_urn": "urn:revet:iam::group/g1"})).status_code == 409
    assert (await client.post(url, json={"principal_urn": "urn:revet:documents::document/1"})).status_code == 400

    items = (await client.get(url)).json()["items"]
    assert [a["id"] for a in items] == [attachment["id"]]

    assert (await client.delete(f"{url}/{attachment['id']}")).status_code == 200
    assert (await client.delete(f"{url}/{attachment['id']}")).status_code == 404
    assert (await client.get(url)).json()["items"] == []


async def test_attach_to_missing_policy(client):
    res = await client.post("/admin/policies/nope/attachments", json={"principal_urn": "urn:revet:iam::user/u1"})
    assert res.status_code == 404


async def test_principal_views(client):
    readers = await _create(client, name="readers")
    writers = await _create(client, name="writers")
    await client.post(
        f"/admin/policies/{readers['id']}/attachments",
        json={"principal_urn": "urn:revet:iam::user/u1"},
    )

    res = await client.get("/admin/principals/user/u1/policies")
    assert res.status_code == 200
    body = res.json()
    assert body["principal_urn"] == "urn:revet:iam::user/u1"
    assert [i["policy"]["name"] for i in body["items"]] == ["readers"]

    res = await client.get("/admin/principals/user/u1/available-policies")
    assert [p["id"] for p in res.json()["items"]] == [writers["id"]]

    res = await client.get("/admin/principals/group/g9/available-policies")
    assert len(res.json()["items"]) == 2

    assert (await client.get("/admin/principals/document/42/policies")).status_code == 400


async def test_delete_policy_detaches_everywhere(client):
    policy = await _create(client)
    url = f"/admin/policies/{policy['id']}/attachments"
    await client.post(url, json={"principal_urn": "urn:revet:iam::user/u1"})
    await client.post(url, json={"principal_urn": "urn:revet:iam::group/g1"})

    res = await client.delete(f"/admin/policies/{policy['id']}")
    assert res.json() == {"ok": True, "detached": 2}

    assert (await client.get("/admin/principals/user/u1/policies")).json()["items"] == []
    assert (await client.get("/admin/principals/group/g1/policies")).json()["items"] == []


async def test_catalog_actions(client):
    res = await client.get("/catalog/actions")
    names = [c["name"] for c in res.json()["items"]]
    assert names[-1] == "Wildcards"

    res = await client.get("/catalog/actions", params={"q": "download"})
    hits = [a["action"] for c in res.json()["items"] for a in c["actions"]]
    assert "documents:DownloadDocument" in hits
    assert "documents:ListBuckets" not in hits


async def test_catalog_resources(client):
    types = (await client.get("/catalog/resource-types")).json()["items"]
    doc = next(t for t in types if t["id"] == "document")
    assert doc["placeholder"] == "urn:revet:documents::document/*"

    res = await client.post("/catalog/resources/resolve", json={"resource_type": "document", "identifier": "42"})
    assert res.json() == {"urn": "urn:revet:documents::document/42", "label": "Document: 42", "resource_type": "document"}

    res = await client.post("/catalog/resources/resolve", json={"resource_type": "invoice"})
    assert res.status_code == 404
    res = await client.post("/catalog/resources/resolve", json={"resource_type": "document", "identifier": ""})
    assert res.status_code == 400

    res = await client.get("/catalog/resources/label", params={"urn": "urn:elsewhere:x::y/1"})
    assert res.json() == {"urn": "urn:elsewhere:x::y/1", "label": "urn:elsewhere:x::y/1", "resource_type": None}


class _DeletedAfterFirstLookup:
    """Policy store whose policy vanishes right after the first get()."""

    def __init__(self, inner):
        self._inner = inner
        self._seen = False

    async def get(self, id):
        if self._seen:
            return None
        self._seen = True
        return await self._inner.get(id)


async def test_attach_racing_policy_delete_leaves_no_attachment(client):
    policy = await _create(client)
    store = app.state.policy_store
    app.state.policy_store = _DeletedAfterFirstLookup(store)
    try:
        res = await client.post(
            f"/admin/policies/{policy['id']}/attachments",
            json={"principal_urn": "urn:revet:iam::user/u1"},
        )
    finally:
        app.state.policy_store = store

    assert res.status_code == 404
    assert await app.state.attachment_registry.list_for_principal("urn:revet:iam::user/u1") == []
    assert await app.state.attachment_registry.list_for_policy(policy["id"]) == []
