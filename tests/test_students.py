from pymongo.errors import PyMongoError

from conftest import auth_headers


class TestProfile:
    def test_student_reads_own_profile(self, client, student):
        res = client.get("/api/user/1", headers=student)

        assert res.status_code == 200
        body = res.json()
        assert body["name"] == "Alex Sharma"
        assert body["coins"] == 11250
        assert [c["courseId"] for c in body["activeCourses"]] == [101, 102, 103]
        assert body["activeCourses"][0]["dueNext"] == "Module 3 Quiz"

    def test_student_cannot_read_other_profile(self, client, student):
        res = client.get("/api/user/2", headers=student)

        assert res.status_code == 403
        assert res.json() == {"error": "students may only view their own profile"}

    def test_faculty_reads_any_profile(self, client, faculty):
        assert client.get("/api/user/2", headers=faculty).json()["name"] == "Jordan Lee"

    def test_unknown_user(self, client, admin):
        res = client.get("/api/user/404", headers=admin)

        assert res.status_code == 404
        assert res.json() == {"error": "user not found"}

    def test_non_numeric_id(self, client, admin):
        res = client.get("/api/user/abc", headers=admin)

        assert res.status_code == 400
        assert res.json() == {"error": "invalid payload"}


class TestQuests:
    def test_list_marks_completed(self, client, student):
        quests = client.get("/api/quests", headers=student).json()

        assert [q["id"] for q in quests] == [1, 2, 3, 4]
        assert [q["completed"] for q in quests] == [True, False, False, False]
        assert "answer" not in quests[0]

    def test_student_cannot_list_for_someone_else(self, client, student):
        quests = client.get("/api/quests", params={"user_id": 2}, headers=student).json()

        assert quests[0]["completed"] is True
        assert quests[1]["completed"] is False

    def test_admin_lists_for_another_user(self, client, admin):
        quests = client.get("/api/quests", params={"user_id": 2}, headers=admin).json()

        assert [q["completed"] for q in quests] == [False, True, False, False]

    def test_completion_is_idempotent(self, client, student, mongo):
        first = client.post("/api/quests/3/complete", headers=student)
        second = client.post("/api/quests/3/complete", headers=student)

        assert first.status_code == 200
        assert first.json() == {"success": True, "coins": 25}
        assert second.json() == {"success": True, "coins": 25}
        assert mongo.user_quests.count_documents({"user_id": 1, "quest_id": 3}) == 1
        assert mongo.users.find_one({"user_id": 1})["coins"] == 11250 + 25

    def test_student_body_user_id_is_ignored(self, client, student, mongo):
        client.post("/api/quests/4/complete", json={"user_id": 3}, headers=student)

        assert mongo.user_quests.count_documents({"user_id": 1, "quest_id": 4}) == 1
        assert mongo.user_quests.count_documents({"user_id": 3}) == 0

    def test_admin_completes_for_student(self, client, admin, mongo):
        res = client.post("/api/quests/2/complete", json={"user_id": 3}, headers=admin)

        assert res.status_code == 200
        assert mongo.users.find_one({"user_id": 3})["coins"] == 11800 + 75

    def test_faculty_cannot_complete_for_student(self, client, faculty):
        res = client.post("/api/quests/1/complete", json={"user_id": 1}, headers=faculty)

        assert res.status_code == 403
        assert res.json() == {"error": "faculty cannot complete quests for students"}

    def test_unknown_quest(self, client, student):
        res = client.post("/api/quests/99/complete", headers=student)

        assert res.status_code == 404
        assert res.json() == {"error": "quest not found"}


class TestLeaderboard:
    def test_sorted_by_coins(self, client, student):
        board = client.get("/api/leaderboard", headers=student).json()

        assert [e["id"] for e in board] == [2, 3, 1, 4, 5, 7, 6]
        coins = [e["coins"] for e in board]
        assert coins == sorted(coins, reverse=True)

    def test_limit(self, client, student):
        board = client.get("/api/leaderboard", params={"limit": 3}, headers=student).json()

        assert [e["id"] for e in board] == [2, 3, 1]

    def test_non_positive_limit_returns_everyone(self, client, student):
        assert len(client.get("/api/leaderboard", params={"limit": -1}, headers=student).json()) == 7

    def test_counts_completed_quests(self, client, student):
        client.post("/api/quests/2/complete", headers=student)
        board = {e["id"]: e for e in client.get("/api/leaderboard", headers=student).json()}

        assert board[1]["completedQuests"] == 2
        assert board[2]["completedQuests"] == 1
        assert board[3]["completedQuests"] == 0

    def test_store_failure(self, client, student, database, monkeypatch):
        def broken(*args, **kwargs):
            raise PyMongoError("connection reset")

        monkeypatch.setattr(database.users, "find", broken)
        res = client.get("/api/leaderboard", headers=student)

        assert res.status_code == 500
        assert res.json() == {"error": "failed to load leaderboard"}


class TestPolls:
    def test_list(self, client, student):
        polls = client.get("/api/polls", headers=student).json()

        assert [p["id"] for p in polls] == [1, 2]
        assert polls[0]["timeLeft"] == "2 days left"
        assert polls[0]["options"][0] == {"text": "South Indian Thali", "votes": 45}

    def test_vote_once(self, client, student, mongo):
        first = client.post("/api/polls/1/vote", json={"option_index": 0}, headers=student)
        second = client.post("/api/polls/1/vote", json={"option_index": 1}, headers=student)

        assert first.json() == {"success": True}
        assert second.json() == {"success": True}
        options = mongo.polls.find_one({"poll_id": 1})["options"]
        assert options[0]["votes"] == 46
        assert options[1]["votes"] == 32
        assert mongo.votes.count_documents({"user_id": 1, "poll_id": 1}) == 1

    def test_votes_from_different_users(self, client, mongo):
        client.post("/api/polls/2/vote", json={"option_index": 2}, headers=auth_headers(1, "student"))
        client.post("/api/polls/2/vote", json={"option_index": 2}, headers=auth_headers(2, "student"))

        assert mongo.polls.find_one({"poll_id": 2})["options"][2]["votes"] == 40

    def test_option_out_of_range(self, client, student):
        res = client.post("/api/polls/1/vote", json={"option_index": 9}, headers=student)

        assert res.status_code == 400
        assert res.json() == {"error": "invalid option index"}

    def test_negative_option(self, client, student):
        assert client.post("/api/polls/1/vote", json={"option_index": -1}, headers=student).status_code == 400

    def test_unknown_poll(self, client, student):
        res = client.post("/api/polls/42/vote", json={"option_index": 0}, headers=student)

        assert res.status_code == 404
        assert res.json() == {"error": "poll not found"}

    def test_missing_option(self, client, student):
        res = client.post("/api/polls/1/vote", json={}, headers=student)

        assert res.status_code == 400
        assert res.json() == {"error": "invalid payload"}


class TestStudentDashboard:
    def test_dashboard(self, client, student):
        res = client.get("/api/student/dashboard", headers=student)

        assert res.status_code == 200
        body = res.json()
        assert body["user"]["id"] == 1
        assert body["metrics"] == {
            "courseProgress": 75,
            "academicStanding": 90,
            "gamificationLevel": 60,
            "currentStreak": 14,
        }
        assert [q["xp"] for q in body["dailyQuests"]] == [50, 75, 25, 40]
        assert body["dailyQuests"][0]["completed"] is True
        assert len(body["leaderboard"]) == 5
        assert len(body["activeCourses"]) == 3
        assert [p["title"] for p in body["researchFeed"]] == [
            "Breakthrough in AI-driven sustainable agriculture",
            "Need insight on quantum coherence times",
            "Validating a new compound for neurological disorders",
        ]
        assert body["researchFeed"][1]["isMine"] is True

    def test_student_user_id_is_ignored(self, client, student):
        body = client.get("/api/student/dashboard", params={"user_id": 2}, headers=student).json()
        assert body["user"]["id"] == 1

    def test_admin_inspects_student(self, client, admin):
        body = client.get("/api/student/dashboard", params={"user_id": 2}, headers=admin).json()

        assert body["user"]["name"] == "Jordan Lee"
        assert body["dailyQuests"][1]["completed"] is True

    def test_missing_student(self, client):
        res = client.get("/api/student/dashboard", headers=auth_headers(77, "student"))

        assert res.status_code == 404
        assert res.json() == {"error": "student not found"}
