import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from knownorigin_backend import app as app_module
from knownorigin_backend.api.routes import router
from knownorigin_backend.config import Settings
from knownorigin_backend.core.errors import ContractNotFoundError, SourceQueryError
from knownorigin_backend.service import NFTService

from conftest import DIGITAL_ASSET, MARKETPLACE_ADAPTER, make_edition, make_token


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(router)
    app.state.service = service
    return TestClient(app)


def test_health(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_list_nfts(client, edition_api, token_api):
    edition_api.fragments = [make_edition("7", "0xA"), make_edition("8", "0xA")]
    edition_api.total = 2
    token_api.total = 1

    response = client.get("/v1/nfts", params={"first": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert [nft["tokenId"] for nft in body["nfts"]] == ["7", "8"]
    assert body["nfts"][0]["activeOrderId"] == "KNOWN_ORIGIN-order-7"
    assert body["accounts"] == [
        {"id": "0xA", "address": "0xA", "nftIds": [f"{DIGITAL_ASSET}-7", f"{DIGITAL_ASSET}-8"]}
    ]
    assert body["orders"][0]["price"] == "2.05"
    assert body["orders"][0]["expiresAt"] is None
    assert edition_api.fetch_calls[0].first == 2


def test_list_tokens(client, token_api, edition_api):
    token_api.fragments = [make_token("1", "0xb")]

    body = client.get("/v1/nfts", params={"is_token": "true"}).json()

    assert body["orders"] == []
    assert body["nfts"][0]["url"] == "https://knownorigin.io/token/1"
    assert edition_api.fetch_calls == []


def test_count(client, token_api, edition_api):
    token_api.total = 2
    edition_api.total = 5

    assert client.get("/v1/nfts/count").json() == {"count": 7}
    assert client.get("/v1/nfts/count", params={"is_token": "false"}).json() == {"count": 5}


def test_get_nft(client, edition_api):
    edition_api.fragments = [make_edition("7", "0xA")]

    body = client.get(f"/v1/nfts/{DIGITAL_ASSET}/7").json()

    assert body["nft"]["id"] == f"{DIGITAL_ASSET}-7"
    assert body["order"]["id"] == "KNOWN_ORIGIN-order-7"


def test_get_token_nft_has_no_order(client, edition_api):
    edition_api.fragments = [make_token("3", "0xb")]

    assert client.get(f"/v1/nfts/{DIGITAL_ASSET}/3").json()["order"] is None


def test_get_missing_nft(client):
    assert client.get(f"/v1/nfts/{DIGITAL_ASSET}/404").status_code == 404


def test_upstream_failure_is_bad_gateway(client, edition_api):
    edition_api.error = SourceQueryError([{"message": "indexer down"}])

    response = client.get("/v1/nfts")

    assert response.status_code == 502
    assert "indexer down" in response.json()["detail"]


def test_missing_service():
    app = FastAPI()
    app.include_router(router)

    assert TestClient(app).get("/v1/nfts/count").status_code == 500


def test_search_reaches_the_sources(client, token_api, edition_api):
    client.get("/v1/nfts", params={"search": "sun"})
    client.get("/v1/nfts/count", params={"search": "sun"})

    assert edition_api.fetch_calls[0].search == "sun"
    assert [params.search for params in token_api.count_calls] == ["sun", "sun"]


def test_transport_failure_is_bad_gateway(client, edition_api):
    edition_api.error = httpx.ConnectError("connection refused")

    response = client.get(f"/v1/nfts/{DIGITAL_ASSET}/7")

    assert response.status_code == 502
    assert "connection refused" in response.json()["detail"]


class TestStartup:
    def test_wires_service_from_settings(self, monkeypatch):
        monkeypatch.setattr(
            app_module, "settings", Settings(_env_file=None, KO_MARKETPLACE_ADAPTER_ADDRESS=MARKETPLACE_ADAPTER)
        )

        with TestClient(app_module.create_app()) as client:
            assert isinstance(client.app.state.service, NFTService)
            assert client.get("/healthz").status_code == 200

    def test_missing_contract_address_fails_fast(self, monkeypatch):
        monkeypatch.delenv("KO_MARKETPLACE_ADAPTER_ADDRESS", raising=False)
        monkeypatch.setattr(app_module, "settings", Settings(_env_file=None))

        with pytest.raises(ContractNotFoundError, match="MARKETPLACE_ADAPTER"):
            with TestClient(app_module.create_app()):
                pass
