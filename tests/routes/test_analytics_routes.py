# tests/routes/test_analytics_routes.py
"""Tests for app/routes/analytics.py endpoints."""

import pytest
from httpx import AsyncClient

from app.utils.timezone import utc_now
from tests.conftest import ArticleFactory


class TestRecordView:
    """Tests for POST /analytics/articles/{article_id}/view."""

    @pytest.mark.asyncio
    async def test_view_counted_once_per_day(
        self,
        client: AsyncClient,
        make_article: ArticleFactory,
    ) -> None:
        article = await make_article(article_id=42)
        headers = {"X-Forwarded-For": "203.0.113.7"}

        first = await client.post(f"/analytics/articles/{article.id}/view", headers=headers)
        second = await client.post(f"/analytics/articles/{article.id}/view", headers=headers)

        assert first.status_code == 200
        assert first.json() == {"counted": True}
        assert second.json() == {"counted": False}

        detail = await client.get(f"/analytics/articles/{article.id}", params={"days": 1})
        assert detail.json()["article"]["viewCount"] == 1

    @pytest.mark.asyncio
    async def test_identity_comes_from_forwarded_header(
        self,
        client: AsyncClient,
        make_article: ArticleFactory,
    ) -> None:
        """Two clients behind the proxy are two identities."""
        article = await make_article()

        for ip in ("198.51.100.1", "198.51.100.2"):
            response = await client.post(
                f"/analytics/articles/{article.id}/view",
                headers={"X-Forwarded-For": ip},
            )
            assert response.json() == {"counted": True}

    @pytest.mark.asyncio
    async def test_missing_article(self, client: AsyncClient) -> None:
        response = await client.post("/analytics/articles/99999/view")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "ARTICLE_NOT_FOUND"
        assert "99999" in body["detail"]

    @pytest.mark.asyncio
    async def test_non_positive_id(self, client: AsyncClient) -> None:
        response = await client.post("/analytics/articles/0/view")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, client: AsyncClient) -> None:
        response = await client.post("/analytics/articles/abc/view")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_ARGUMENT"
        assert body["errors"][0]["field"] == "article_id"

    @pytest.mark.asyncio
    async def test_non_numeric_id_on_reads(self, client: AsyncClient) -> None:
        for url in ("/analytics/articles/abc/status", "/analytics/articles/abc"):
            response = await client.get(url)

            assert response.status_code == 400
            assert response.json()["code"] == "INVALID_ARGUMENT"


class TestToggleLike:
    """Tests for like toggling and like status."""

    @pytest.mark.asyncio
    async def test_toggle_and_status(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article(article_id=7)
        headers = {"X-Forwarded-For": "9.9.9.9"}
        url = f"/analytics/articles/{article.id}"

        liked = await client.post(f"{url}/like", headers=headers)
        status = await client.get(f"{url}/status", headers=headers)
        other = await client.get(f"{url}/status", headers={"X-Forwarded-For": "8.8.8.8"})

        assert liked.json() == {"liked": True}
        assert status.json() == {"articleId": 7, "hasLiked": True}
        assert other.json()["hasLiked"] is False

        unliked = await client.post(f"{url}/like", headers=headers)
        assert unliked.json() == {"liked": False}

        detail = await client.get(url, params={"days": 1})
        assert detail.json()["article"]["likeCount"] == 0

    @pytest.mark.asyncio
    async def test_missing_article(self, client: AsyncClient) -> None:
        response = await client.post("/analytics/articles/99999/like")

        assert response.status_code == 404


class TestDashboard:
    """Tests for GET /analytics/dashboard."""

    @pytest.mark.asyncio
    async def test_camel_case_payload(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        await make_article(published_at=utc_now(), view_count=3, like_count=1)

        response = await client.get("/analytics/dashboard", params={"range": "7d"})

        assert response.status_code == 200
        body = response.json()
        assert body["totalArticles"] == 1
        assert body["totalViews"] == 3
        assert body["totalLikes"] == 1
        assert body["dateRange"]["range"] == "7d"
        assert body["dateRange"]["period"] == "7 days"
        assert len(body["viewsTrend"]) == 7
        assert set(body["viewsTrend"][0]) == {"date", "views"}
        assert body["topArticles"][0]["viewCount"] == 3
        assert "generatedAt" in body

    @pytest.mark.asyncio
    async def test_defaults_to_all_time(self, client: AsyncClient) -> None:
        response = await client.get("/analytics/dashboard")

        assert response.status_code == 200
        assert response.json()["dateRange"] == {
            "range": "all",
            "period": "all time",
            "start": None,
            "end": response.json()["generatedAt"],
        }
        assert response.json()["viewsTrend"] == []

    @pytest.mark.asyncio
    async def test_invalid_range(self, client: AsyncClient) -> None:
        response = await client.get("/analytics/dashboard", params={"range": "1y"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RANGE"


class TestTopArticles:
    """Tests for GET /analytics/articles/top."""

    @pytest.mark.asyncio
    async def test_ranking(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        first = await make_article(view_count=10, like_count=3)
        second = await make_article(view_count=10, like_count=7)
        third = await make_article(view_count=5, like_count=1)

        response = await client.get("/analytics/articles/top", params={"limit": 3})

        assert response.status_code == 200
        body = response.json()
        assert [a["id"] for a in body["articles"]] == [second.id, first.id, third.id]
        assert body["limit"] == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 51, "abc", "2.5"])
    async def test_limit_bounds(self, client: AsyncClient, limit: int | str) -> None:
        response = await client.get("/analytics/articles/top", params={"limit": limit})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"


class TestArticleAnalytics:
    """Tests for GET /analytics/articles/{article_id}."""

    @pytest.mark.asyncio
    async def test_trend_shape(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article()

        response = await client.get(f"/analytics/articles/{article.id}", params={"days": 14})

        assert response.status_code == 200
        body = response.json()
        assert body["days"] == 14
        assert len(body["trend"]) == 14
        assert set(body["trend"][0]) == {"date", "views", "likes"}
        assert body["article"]["slug"] == article.slug

    @pytest.mark.asyncio
    async def test_days_out_of_bounds(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article()

        response = await client.get(f"/analytics/articles/{article.id}", params={"days": 400})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_article(self, client: AsyncClient) -> None:
        response = await client.get("/analytics/articles/99999")

        assert response.status_code == 404


class TestEngagementSummary:
    """Tests for GET /analytics/engagement."""

    @pytest.mark.asyncio
    async def test_summary_after_views(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article()
        for ip in ("1.1.1.1", "2.2.2.2"):
            await client.post(
                f"/analytics/articles/{article.id}/view",
                headers={"X-Forwarded-For": ip},
            )

        response = await client.get("/analytics/engagement")

        assert response.status_code == 200
        assert response.json() == {
            "period": "7 days",
            "articlesViewed": 1,
            "totalViews": 2,
            "uniqueVisitors": 2,
            "totalLikes": 0,
            "avgViewsPerVisitor": 1.0,
        }

    @pytest.mark.asyncio
    async def test_all_time_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/analytics/engagement", params={"range": "all"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RANGE"


class TestAppSurface:
    """Tests for the root endpoint and request id header."""

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to Inkwell Analytics Backend"}

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
