import pytest
from datetime import datetime, timedelta, timezone

from curio.news.services.retention_sweeper import RetentionSweeper

NOW = datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)


def fill(raw_repo, make_raw_article, count, age):
    for index in range(count):
        raw_repo.add(make_raw_article(f"https://example.com/{age.days}/{index}", timestamp=NOW - age))


class TestRetentionSweeper:
    @pytest.mark.asyncio
    async def test_deletes_only_articles_older_than_cutoff(self, raw_repo, make_raw_article):
        old = make_raw_article("https://example.com/old", timestamp=NOW - timedelta(days=31))
        old_processed = make_raw_article("https://example.com/old-done", timestamp=NOW - timedelta(days=45), is_processed=True)
        at_cutoff = make_raw_article("https://example.com/edge", timestamp=NOW - timedelta(days=30))
        fresh = make_raw_article("https://example.com/fresh", timestamp=NOW - timedelta(days=2))
        for article in (old, old_processed, at_cutoff, fresh):
            raw_repo.add(article)

        result = await RetentionSweeper(raw_repo).run(now=NOW)

        assert result.cutoff == NOW - timedelta(days=30)
        assert result.matched == 2
        assert result.deleted == 2
        assert result.completed is True
        assert set(raw_repo.articles) == {at_cutoff.id, fresh.id}

    @pytest.mark.asyncio
    async def test_nothing_to_delete(self, raw_repo, make_raw_article):
        raw_repo.add(make_raw_article("https://example.com/fresh", timestamp=NOW))

        result = await RetentionSweeper(raw_repo).run(now=NOW)

        assert result.matched == 0
        assert result.batches == 0
        assert raw_repo.delete_calls == []

    @pytest.mark.asyncio
    async def test_deletes_in_batches_of_500(self, raw_repo, make_raw_article):
        fill(raw_repo, make_raw_article, 1201, timedelta(days=40))

        result = await RetentionSweeper(raw_repo, batch_size=500).run(now=NOW)

        assert [len(call) for call in raw_repo.delete_calls] == [500, 500, 201]
        assert result.deleted == 1201
        assert result.batches == 3
        assert raw_repo.articles == {}

    @pytest.mark.asyncio
    async def test_failed_batch_ends_run_and_next_run_finishes(self, raw_repo, make_raw_article):
        fill(raw_repo, make_raw_article, 1201, timedelta(days=40))
        raw_repo.fail_delete_on_call = 2
        sweeper = RetentionSweeper(raw_repo, batch_size=500)

        first = await sweeper.run(now=NOW)

        assert first.completed is False
        assert first.deleted == 500
        assert first.batches == 1
        assert len(raw_repo.articles) == 701

        raw_repo.fail_delete_on_call = None
        second = await sweeper.run(now=NOW)

        assert second.completed is True
        assert second.matched == 701
        assert second.deleted == 701
        assert raw_repo.articles == {}

    @pytest.mark.asyncio
    async def test_custom_retention_window(self, raw_repo, make_raw_article):
        raw_repo.add(make_raw_article("https://example.com/week-old", timestamp=NOW - timedelta(days=8)))

        result = await RetentionSweeper(raw_repo, retention_days=7).run(now=NOW)

        assert result.deleted == 1
