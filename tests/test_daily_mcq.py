# tests/test_daily_mcq.py
from upsc_prep.core.models import MCQResponse, UserActivity, UserStreak

CORRECT = ["A", "B", "C", "B", "C"]


def fetch_questions(client, headers):
    response = client.get("/api/daily-mcq/today/questions", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]["questions"]


def submit(client, headers, picks, time_taken=300):
    questions = fetch_questions(client, headers)
    answers = [
        {"questionId": question["id"], "selectedOption": pick, "timeTaken": 30}
        for question, pick in zip(questions, picks)
    ]
    return client.post("/api/daily-mcq/today/submit", json={"answers": answers, "timeTaken": time_taken},
                       headers=headers)


def test_today_requires_content(client, auth_headers):
    response = client.get("/api/daily-mcq/today")
    assert response.status_code == 404
    assert response.json()["message"] == "No MCQ challenge available for today"


def test_today_is_public_with_attempted_flag(client, seeded, auth_headers):
    anonymous = client.get("/api/daily-mcq/today")
    assert anonymous.status_code == 200
    data = anonymous.json()["data"]
    assert data["questionCount"] == 5
    assert data["totalMarks"] == 10
    assert data["attempted"] is False

    submit(client, auth_headers, CORRECT)
    mine = client.get("/api/daily-mcq/today", headers=auth_headers).json()["data"]
    assert mine["attempted"] is True


def test_questions_hide_answers(client, seeded, auth_headers):
    questions = fetch_questions(client, auth_headers)
    assert [q["questionNum"] for q in questions] == [1, 2, 3, 4, 5]
    for question in questions:
        assert "correctOption" not in question
        assert "explanation" not in question
        assert len(question["options"]) == 4


def test_perfect_submission(client, seeded, auth_headers, db):
    response = submit(client, auth_headers, CORRECT)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["score"] == 10.0
    assert data["accuracy"] == 100
    assert data["correctCount"] == 5
    assert data["wrongCount"] == 0
    assert data["skippedCount"] == 0
    assert data["timeTaken"] == 300
    assert sorted(data["strongTopics"]) == ["Economy", "Environment", "Geography", "History", "Indian Polity"]
    assert data["weakTopics"] == []

    assert db.query(UserActivity).filter(UserActivity.type == "mcq").count() == 1
    streak = db.query(UserStreak).one()
    assert streak.current_streak == 1


def test_null_and_fractional_time_taken(client, seeded, auth_headers, db):
    questions = fetch_questions(client, auth_headers)
    answers = [
        {"questionId": question["id"], "selectedOption": pick, "timeTaken": taken}
        for question, pick, taken in zip(questions, CORRECT, [None, 12.5, 30, None, 4.4])
    ]
    response = client.post("/api/daily-mcq/today/submit", json={"answers": answers, "timeTaken": 62.5},
                           headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["timeTaken"] == 63
    times = sorted(row.time_taken for row in db.query(MCQResponse).all())
    assert times == [0, 0, 4, 13, 30]

    other = client.post("/api/daily-mcq/today/submit", json={"answers": [], "timeTaken": None},
                        headers=auth_headers)
    assert other.status_code == 400
    assert other.json()["message"] == "You have already submitted today's MCQ"


def test_mixed_submission_counts_skips(client, seeded, auth_headers):
    # right, wrong, skipped, right, wrong
    response = submit(client, auth_headers, ["A", "C", None, "B", "A"])

    data = response.json()["data"]
    assert data["correctCount"] == 2
    assert data["wrongCount"] == 2
    assert data["skippedCount"] == 1
    assert data["score"] == 4.0
    assert data["accuracy"] == 50.0
    assert "Indian Polity" in data["strongTopics"]
    assert "Geography" in data["weakTopics"]
    assert "Economy" in data["weakTopics"]


def test_second_submission_rejected(client, seeded, auth_headers):
    assert submit(client, auth_headers, CORRECT).status_code == 200

    again = submit(client, auth_headers, CORRECT)
    assert again.status_code == 400
    assert again.json()["message"] == "You have already submitted today's MCQ"


def test_results_rank_and_percentile(client, seeded, auth_headers, other_headers):
    submit(client, auth_headers, CORRECT)
    submit(client, other_headers, ["A", "A", "A", "A", "A"])

    leader = client.get("/api/daily-mcq/today/results", headers=auth_headers).json()["data"]
    assert leader["rank"] == 1
    assert leader["totalParticipants"] == 2
    assert leader["percentile"] == 100
    assert leader["questionCount"] == 5

    trailer = client.get("/api/daily-mcq/today/results", headers=other_headers).json()["data"]
    assert trailer["rank"] == 2
    assert trailer["percentile"] == 50


def test_results_without_attempt(client, seeded, auth_headers):
    response = client.get("/api/daily-mcq/today/results", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "No attempt found for today"


def test_review_reveals_answers(client, seeded, auth_headers):
    submit(client, auth_headers, ["A", "C", None, "B", "A"])

    questions = client.get("/api/daily-mcq/today/review", headers=auth_headers).json()["data"]["questions"]
    assert [q["correctOption"] for q in questions] == CORRECT
    assert [q["selectedOption"] for q in questions] == ["A", "C", None, "B", "A"]
    assert [q["isCorrect"] for q in questions] == [True, False, False, True, False]
    assert questions[0]["explanation"]


def test_recommendations(client, seeded, auth_headers):
    empty = client.get("/api/daily-mcq/today/recommendations", headers=auth_headers).json()["data"]
    assert empty["recommendations"] == []

    submit(client, auth_headers, ["A", "C", None, "B", "A"])
    data = client.get("/api/daily-mcq/today/recommendations", headers=auth_headers).json()["data"]
    types = [item["type"] for item in data["recommendations"]]
    assert types == ["study", "practice", "editorial", "answer"]


def test_submit_requires_auth(client, seeded):
    response = client.post("/api/daily-mcq/today/submit", json={"answers": []})
    assert response.status_code == 401
