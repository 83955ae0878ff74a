from datetime import datetime, timedelta

from conftest import auth_headers
from learnify.research import utils
from learnify.research.service import author_role_label, build_post_response, is_trending

NOW = datetime(2024, 5, 1, 12, 0, 0)


class TestFeed:
    def test_newest_first(self, client, faculty):
        items = client.get("/api/research/posts", headers=faculty).json()["items"]

        assert len(items) == 3
        assert items[0]["title"] == "Breakthrough in AI-driven sustainable agriculture"
        assert items[0]["isMine"] is True
        assert items[0]["author"] == {"name": "Dr. Evelyn Reed", "role": "Lead Researcher · AI Sustainability Lab"}
        assert items[0]["timestamp"] == "2 hours ago"
        assert items[0]["image"].startswith("https://images.unsplash.com/")
        assert "link" not in items[0]
        assert "image" not in items[1]
        assert items[2]["category"] == "My Research"

    def test_limit(self, client, student):
        items = client.get("/api/research/posts", params={"limit": 1}, headers=student).json()["items"]
        assert len(items) == 1

    def test_empty_feed(self, make_client, student):
        client = make_client(seed=False)
        assert client.get("/api/research/posts", headers=student).json() == {"items": []}


class TestCreatePost:
    def test_create(self, client, student):
        res = client.post(
            "/api/research/posts",
            json={
                "body": "Exploring #GraphNeuralNetworks for protein folding\nMore detail follows.",
                "tags": ["#AI", "ai", " Machine Learning "],
                "category": "Collaboration",
                "link": "example.org/paper",
            },
            headers=student,
        )

        assert res.status_code == 201
        post = res.json()
        assert post["title"] == "Exploring #GraphNeuralNetworks for protein folding"
        assert post["tags"] == ["AI", "Machine-Learning", "GraphNeuralNetworks"]
        assert post["category"] == "Collaboration"
        assert post["isCollaboration"] is True
        assert post["link"] == "https://example.org/paper"
        assert post["author"] == {"name": "Alex Sharma", "role": "Student · Introduction to AI"}
        assert post["isMine"] is True
        assert post["timestamp"] == "Just now"
        assert post["stats"] == {"likes": 0, "comments": 0, "collaborations": 0}

    def test_created_post_leads_the_feed(self, client, student, faculty):
        created = client.post("/api/research/posts", json={"title": "Fresh results"}, headers=student).json()
        items = client.get("/api/research/posts", headers=faculty).json()["items"]

        assert items[0]["id"] == created["id"]
        assert items[0]["isMine"] is False
        assert items[0]["summary"] == "Fresh results"

    def test_explicit_collaboration_flag_wins(self, client, faculty):
        post = client.post(
            "/api/research/posts",
            json={"summary": "Looking for partners", "category": "", "isCollaboration": True, "authorRole": "PI"},
            headers=faculty,
        ).json()

        assert post["category"] == "Collaboration"
        assert post["author"]["role"] == "PI"

    def test_content_required(self, client, student):
        res = client.post("/api/research/posts", json={"title": "  ", "tags": ["x"]}, headers=student)

        assert res.status_code == 400
        assert res.json() == {"error": "content is required"}

    def test_unknown_author(self, client):
        res = client.post("/api/research/posts", json={"body": "hi"}, headers=auth_headers(500, "student"))

        assert res.status_code == 404
        assert res.json() == {"error": "user not found"}


class TestTags:
    def test_sanitize(self):
        assert utils.sanitize_tags(["#AI", "ai", " Machine Learning "]) == ["AI", "Machine-Learning"]

    def test_sanitize_caps_count(self):
        assert utils.sanitize_tags([f"t{i}" for i in range(10)]) == ["t0", "t1", "t2", "t3", "t4", "t5"]

    def test_sanitize_drops_blank(self):
        assert utils.sanitize_tags(["#", "  ", None, "-ok-"]) == ["ok"]

    def test_extract_hashtags(self):
        assert utils.extract_hashtags("New #ML results with #ml and #Bio_Tech!") == ["ML", "Bio_Tech"]

    def test_merge_unique(self):
        assert utils.merge_unique(["AI", "Bio"], ["ai", "Chem"], limit=3) == ["AI", "Bio", "Chem"]


class TestTextHelpers:
    def test_truncate(self):
        assert utils.truncate_text("abcdef", 3) == "abc…"
        assert utils.truncate_text("  abc  ", 10) == "abc"

    def test_derive_title(self):
        assert utils.derive_title("\n\n  First line \nsecond") == "First line"
        assert utils.derive_title("") == "Research update"
        assert utils.derive_title("x" * 200) == "x" * 120 + "…"

    def test_normalize_category(self):
        assert utils.normalize_category("collab", False) == "Collaboration"
        assert utils.normalize_category("", True) == "Collaboration"
        assert utils.normalize_category("", False) == "My Research"
        assert utils.normalize_category("Field Notes", False) == "Field Notes"

    def test_ensure_scheme(self):
        assert utils.ensure_scheme("example.org") == "https://example.org"
        assert utils.ensure_scheme("http://example.org") == "http://example.org"
        assert utils.ensure_scheme(" ") == ""


class TestPostMapping:
    def test_trending_by_score(self):
        assert is_trending({"likes": 20, "comments": 4, "collaborations": 2}, now=NOW)

    def test_trending_recent_activity(self):
        post = {"likes": 6, "comments": 3, "collaborations": 1, "created_at": NOW - timedelta(hours=10)}
        assert is_trending(post, now=NOW)
        post["created_at"] = NOW - timedelta(days=5)
        assert not is_trending(post, now=NOW)

    def test_quiet_post_is_not_trending(self):
        assert not is_trending({"likes": 1, "created_at": NOW}, now=NOW)

    def test_fallbacks(self):
        response = build_post_response({"body": "", "author_id": 3}, viewer_id=4)

        assert response.title == "Research update"
        assert response.summary == "An exciting research update from our community."
        assert response.timestamp == "Recently"
        assert response.id == "research-0"
        assert response.is_mine is False

    def test_author_role_label(self):
        assert author_role_label({"role": "faculty"}) == "Faculty Mentor"
        assert author_role_label({"role": "admin"}) == "Administrator"
        assert author_role_label({"role": "student"}) == "Student Researcher"
        assert author_role_label({"role": "student"}, " Postdoc ") == "Postdoc"
