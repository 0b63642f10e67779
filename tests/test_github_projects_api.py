from __future__ import annotations

import httpx
import pytest


@pytest.mark.asyncio
async def test_project_crud(client: httpx.AsyncClient, auth_headers) -> None:
    h = auth_headers("alice", "alice@x.com")

    r = await client.post("/api/github/projects", json={"owner": "acme", "repo": " "}, headers=h)
    assert r.status_code == 400
    assert r.json() == {"detail": "owner and repo are required"}

    r = await client.post(
        "/api/github/projects",
        json={"owner": " acme ", "repo": "web", "display_name": "Website"},
        headers=h,
    )
    assert r.status_code == 201
    project = r.json()["project"]
    assert (project["owner"], project["repo"], project["display_name"]) == ("acme", "web", "Website")
    await client.post("/api/github/projects", json={"owner": "acme", "repo": "api"}, headers=h)

    r = await client.get("/api/github/projects", headers=h)
    repos = {p["repo"]: p for p in r.json()["projects"]}
    assert set(repos) == {"web", "api"}
    assert repos["api"]["display_name"] is None

    r = await client.request("DELETE", "/api/github/projects", json={"id": project["id"]}, headers=h)
    assert r.json() == {"success": True}
    r = await client.get("/api/github/projects", headers=h)
    assert [p["repo"] for p in r.json()["projects"]] == ["api"]


@pytest.mark.asyncio
async def test_delete_validation_and_ownership(client: httpx.AsyncClient, auth_headers) -> None:
    alice = auth_headers("alice", "alice@x.com")
    mallory = auth_headers("mallory")
    project_id = (
        await client.post("/api/github/projects", json={"owner": "acme", "repo": "web"}, headers=alice)
    ).json()["project"]["id"]

    r = await client.request("DELETE", "/api/github/projects", json={}, headers=alice)
    assert r.status_code == 400
    assert r.json() == {"detail": "id is required"}

    r = await client.request("DELETE", "/api/github/projects", json={"id": project_id}, headers=mallory)
    assert r.json() == {"success": True}
    r = await client.get("/api/github/projects", headers=alice)
    assert len(r.json()["projects"]) == 1
    assert (await client.get("/api/github/projects", headers=mallory)).json() == {"projects": []}
