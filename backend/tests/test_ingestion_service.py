"""
Tests for the ingestion service
"""
from datetime import datetime, timedelta

import pytest
import pytz
from sqlalchemy.exc import IntegrityError, OperationalError

from trender.core import EmptyFeedError, FetchError, TransactionError
from trender.models import NEUTRAL_SCORE, SCORE_FIELDS
from trender.services.ingestion import IngestionService, ItemStatus
from trender.services.ingestion.ingestion_service import TRACKED_METRICS, build_card_values, metric_values
from trender.utils.buckets import align_to_bucket

from .conftest import FakeCardStore, FakeCountStore, FakeScraper, make_item


def window_time():
    return datetime(2025, 5, 5, 10, 31, 10, tzinfo=pytz.UTC)


def build_service(database, items=None, card_store=None, count_store=None, error=None):
    return IngestionService(
        database,
        scraper=FakeScraper(items, error=error),
        card_store=card_store or FakeCardStore(),
        count_store=count_store or FakeCountStore(),
        bucket_size_minutes=15,
    )


def counts_for(count_store, card_id):
    return {key[2]: row["metric_value"] for key, row in count_store.rows.items() if key[0] == card_id}


class TestRunIngestion:
    async def test_first_run_writes_cards_and_metrics(self, fake_database, card_store, count_store, front_page, window):
        service = build_service(fake_database, front_page, card_store, count_store)

        result = await service.run_ingestion(window)

        assert result.items_written == 3
        assert result.metrics_written == 9
        assert result.total_fetched == 3
        assert result.window_start == window.start
        assert result.window_end == window.end
        assert result.bucket_size_minutes == 15
        assert set(card_store.rows) == {
            "show-hn-a-tiny-database-101",
            "why-we-moved-off-kubernetes-102",
            "the-history-of-the-qwerty-keyboard-103",
        }
        assert fake_database.commits == 1

    async def test_rank_follows_feed_order(self, fake_database, card_store, count_store, front_page, window):
        await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)

        card_id = card_store.rows["why-we-moved-off-kubernetes-102"]["id"]
        assert counts_for(count_store, card_id) == {"rank": 2, "points": 180, "comments": 120}

    async def test_counts_carry_the_bucket(self, fake_database, card_store, count_store, front_page, window):
        await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)

        for row in count_store.rows.values():
            assert row["bucket_start"] == window.start
            assert row["bucket_end"] == window.end
            assert row["bucket_size"] == "15m"
            assert row["source"] == "hackernews"

    async def test_second_run_in_same_window_is_a_noop(self, fake_database, card_store, count_store, front_page):
        service = build_service(fake_database, front_page, card_store, count_store)
        first_window = align_to_bucket(window_time(), 15, "UTC")
        second_window = align_to_bucket(window_time() + timedelta(seconds=1), 15, "UTC")

        first = await service.run_ingestion(first_window)
        second = await service.run_ingestion(second_window)

        assert (second.window_start, second.window_end) == (first.window_start, first.window_end)
        assert second.items_written == 0
        assert second.metrics_written == 0
        assert second.items_skipped == 3
        assert len(card_store.rows) == 3
        assert len(count_store.rows) == 9

    async def test_existing_cards_get_no_metrics_in_later_buckets(self, fake_database, card_store, count_store, front_page, window):
        service = build_service(fake_database, front_page, card_store, count_store)
        later = align_to_bucket(window.end, 15, "UTC")

        await service.run_ingestion(window)
        result = await service.run_ingestion(later)

        assert result.items_written == 0
        assert result.metrics_written == 0
        assert all(key[3] == window.start for key in count_store.rows)

    async def test_reordered_feed_keeps_first_ranks(self, fake_database, card_store, count_store, front_page, window):
        await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)
        reordered = [make_item(104, "Brand new story")] + list(reversed(front_page))

        result = await build_service(fake_database, reordered, card_store, count_store).run_ingestion(window)

        assert result.items_written == 1
        assert result.items_skipped == 3
        new_id = card_store.rows["brand-new-story-104"]["id"]
        assert counts_for(count_store, new_id)["rank"] == 1
        old_id = card_store.rows["show-hn-a-tiny-database-101"]["id"]
        assert counts_for(count_store, old_id)["rank"] == 1

    async def test_duplicate_items_in_one_feed_write_once(self, fake_database, card_store, count_store, window):
        items = [make_item(7, "Same story"), make_item(7, "Same story")]

        result = await build_service(fake_database, items, card_store, count_store).run_ingestion(window)

        assert result.items_written == 1
        assert result.items_skipped == 1
        assert result.metrics_written == 3

    async def test_malformed_items_fail_individually(self, fake_database, card_store, count_store, window):
        items = [
            make_item(201, "Fine"),
            make_item("", "Missing id"),
            make_item(203, title=None),
            make_item(204, "Also fine", points=None, num_comments=None),
        ]

        result = await build_service(fake_database, items, card_store, count_store).run_ingestion(window)

        assert result.items_written == 2
        assert result.items_failed == 2
        assert [outcome.status for outcome in result.outcomes] == [
            ItemStatus.WRITTEN,
            ItemStatus.FAILED,
            ItemStatus.FAILED,
            ItemStatus.WRITTEN,
        ]
        assert "missing a title" in result.outcomes[2].reason
        # Missing counts are recorded as zero
        card_id = card_store.rows["also-fine-204"]["id"]
        assert counts_for(count_store, card_id) == {"rank": 4, "points": 0, "comments": 0}

    async def test_statement_error_rolls_back_only_that_item(self, fake_database, card_store, front_page, window):
        count_store = FakeCountStore(errors={(2, "comments"): IntegrityError("INSERT", {}, Exception("value out of range"))})

        result = await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)

        assert result.items_written == 2
        assert result.items_failed == 1
        assert result.outcomes[1].reason == "value out of range"
        assert "why-we-moved-off-kubernetes-102" not in card_store.rows
        assert all(key[0] != 2 for key in count_store.rows)
        assert result.metrics_written == 6
        assert len(count_store.rows) == 6
        assert fake_database.commits == 1

    async def test_unexpected_error_is_a_failed_item(self, fake_database, count_store, front_page, window):
        card_store = FakeCardStore(errors={"show-hn-a-tiny-database-101": RuntimeError("boom")})

        result = await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)

        assert result.items_failed == 1
        assert result.outcomes[0].reason == "RuntimeError: boom"
        assert result.items_written == 2

    async def test_connection_loss_rolls_back_the_whole_batch(self, fake_database, count_store, front_page, window):
        card_store = FakeCardStore(
            errors={"the-history-of-the-qwerty-keyboard-103": OperationalError("INSERT", {}, Exception("server closed the connection"))}
        )

        with pytest.raises(TransactionError) as exc_info:
            await build_service(fake_database, front_page, card_store, count_store).run_ingestion(window)

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert card_store.rows == {}
        assert count_store.rows == {}
        assert fake_database.rollbacks == 1
        assert fake_database.commits == 0

    async def test_empty_feed(self, fake_database, card_store, count_store, window):
        with pytest.raises(EmptyFeedError, match="No stories fetched from Hacker News API"):
            await build_service(fake_database, [], card_store, count_store).run_ingestion(window)

        assert fake_database.commits == 0
        assert card_store.rows == {}

    async def test_fetch_error_propagates(self, fake_database, fetch_error, window):
        with pytest.raises(FetchError):
            await build_service(fake_database, error=fetch_error).run_ingestion(window)

        assert fake_database.commits == 0

    async def test_defaults_to_current_window(self, fake_database, front_page):
        result = await build_service(fake_database, front_page).run_ingestion()

        assert result.window_end - result.window_start == timedelta(minutes=15)
        assert result.window_start.minute % 15 == 0


class TestCardValues:
    def test_canonical_card(self):
        scraper = FakeScraper()
        item = make_item(42, "Ask HN: What's your stack?", author="dang", points=33, num_comments=12)

        values = build_card_values(item, scraper)

        assert values["slug"] == "ask-hn-whats-your-stack-42"
        assert values["title"] == "Ask HN: What's your stack?"
        assert values["description"] == "Hacker News story by dang"
        assert values["source"] == "hackernews"
        assert values["source_url"] == "https://example.com/42"
        assert values["category"] == "Technology"
        assert values["source_tags"] == ["hackernews"]
        assert all(values[name] == NEUTRAL_SCORE for name in SCORE_FIELDS)
        metadata = values["metadata"]
        assert metadata["hn_id"] == "42"
        assert metadata["author"] == "dang"
        assert metadata["points"] == 33
        assert metadata["num_comments"] == 12
        assert metadata["hn_url"] == "https://news.ycombinator.com/item?id=42"
        assert metadata["created_at"] == "2023-11-14T22:13:20+00:00"

    def test_self_post_links_to_discussion(self):
        values = build_card_values(make_item(43, "Ask HN: Anyone?", url=None), FakeScraper())

        assert values["source_url"] == "https://news.ycombinator.com/item?id=43"

    def test_metric_values_order(self):
        assert [name for name, _ in metric_values(3, make_item(1))] == list(TRACKED_METRICS)
