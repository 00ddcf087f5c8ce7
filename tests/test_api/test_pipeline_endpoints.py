import pytest
from unittest.mock import patch

from curio.config import Settings


def submission(article_id, categories):
    return {
        "id": article_id,
        "title": "Title",
        "link": f"https://example.com/{article_id}",
        "source": "Example Wire",
        "timestamp": "2026-10-18T09:00:00Z",
        "original_summary": "Original",
        "generated_summary": "Generated",
        "categories": categories,
    }


@pytest.mark.asyncio
async def test_processed_articles_fan_out(async_client, raw_repo, processed_repo, make_raw_article):
    article = make_raw_article("https://example.com/a1")
    article.id = "a1"
    raw_repo.add(article)

    response = await async_client.post("/api/v1/processed-articles", json=[submission("a1", ["tech", "ai"])])

    assert response.status_code == 200
    assert response.json() == {"success": True, "articlesProcessed": 1, "totalLocationsSaved": 2}
    assert raw_repo.articles["a1"].is_processed is True
    assert set(processed_repo.copies) == {("tech", "a1"), ("ai", "a1")}


@pytest.mark.asyncio
async def test_processed_articles_empty_list(async_client):
    response = await async_client.post("/api/v1/processed-articles", json=[])

    assert response.status_code == 400
    assert response.json() == {"error": "Empty articles list"}


@pytest.mark.asyncio
async def test_processed_articles_bad_json(async_client):
    response = await async_client.post(
        "/api/v1/processed-articles",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be JSON"}


@pytest.mark.asyncio
async def test_processed_articles_batch_failure_is_generic_500(async_client, raw_repo, processed_repo, make_raw_article):
    processed_repo.fail_on_batch = 1

    response = await async_client.post("/api/v1/processed-articles", json=[submission("a1", ["tech"])])

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}
    assert processed_repo.copies == {}


@pytest.mark.asyncio
async def test_raw_articles_lists_unprocessed(async_client, raw_repo, make_raw_article):
    from datetime import datetime, timedelta, timezone

    recent = datetime.now(timezone.utc) - timedelta(days=1)
    raw_repo.add(make_raw_article("https://example.com/new", timestamp=recent))
    raw_repo.add(make_raw_article("https://example.com/done", timestamp=recent, is_processed=True))

    response = await async_client.get("/api/v1/raw-articles")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["articles"][0]["link"] == "https://example.com/new"


@pytest.mark.asyncio
async def test_pipeline_key_required_when_configured(async_client):
    keyed = Settings(_env_file=None, pipeline_api_key="s3cret")

    with patch("curio.api.dependencies.get_settings", return_value=keyed):
        missing = await async_client.get("/api/v1/raw-articles")
        wrong = await async_client.get("/api/v1/raw-articles", headers={"X-API-Key": "nope"})
        ok = await async_client.get("/api/v1/raw-articles", headers={"X-API-Key": "s3cret"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert ok.status_code == 200
