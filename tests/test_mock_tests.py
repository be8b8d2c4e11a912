# tests/test_mock_tests.py
import pytest

from upsc_prep.core.models import MockTest, MockTestAttempt, MockTestQuestion, User
from upsc_prep.services.mock_test_service import build_analysis, weak_subjects


@pytest.fixture
def history_test(client, auth_headers):
    response = client.post("/api/mock-tests/generate", headers=auth_headers, json={
        "source": "subject_wise",
        "subject": "History",
        "examMode": "prelims",
        "questionCount": 5,
        "difficulty": "easy",
    })
    assert response.status_code == 200
    return response.json()["data"]


def answer_key(db, test_id):
    questions = (
        db.query(MockTestQuestion)
        .filter(MockTestQuestion.mock_test_id == test_id)
        .order_by(MockTestQuestion.question_num)
        .all()
    )
    return [(question.id, question.correct_option) for question in questions]


def wrong_option(correct):
    return next(option for option in "ABCD" if option != correct)


def test_catalogue_defaults(client):
    subjects = client.get("/api/mock-tests/subjects").json()["data"]
    assert subjects[0] == {"name": "All Subjects", "count": 0}
    assert {"name": "History", "count": 348} in subjects

    config = client.get("/api/mock-tests/config").json()["data"]
    assert [source["id"] for source in config["sources"]][-1] == "full_length"
    assert len(config["paperTypes"]) == 4


def test_generate(client, db, history_test):
    assert history_test["title"] == "History - prelims Practice"
    assert history_test["questionCount"] == 5
    assert history_test["duration"] == 8
    assert history_test["totalMarks"] == 10

    test = db.get(MockTest, history_test["testId"])
    owner = db.query(User).filter(User.email == "aspirant@example.com").one()
    assert test.created_by == owner.id
    assert test.is_generated is True
    assert {q.subject for q in test.questions} == {"History"}
    assert {q.difficulty for q in test.questions} == {"easy"}


def test_generate_clamps_question_count(client, auth_headers):
    data = client.post("/api/mock-tests/generate", headers=auth_headers,
                       json={"questionCount": 500}).json()["data"]
    assert data["questionCount"] == 100
    assert data["duration"] == 160
    assert data["title"] == "Mixed - prelims Practice"


def test_generate_accepts_null_options(client, db, auth_headers):
    response = client.post("/api/mock-tests/generate", headers=auth_headers, json={
        "subject": "History", "source": None, "examMode": None, "difficulty": None, "questionCount": 5,
    })
    assert response.status_code == 200

    test = db.get(MockTest, response.json()["data"]["testId"])
    assert test.source == "mixed"
    assert test.exam_mode == "prelims"
    assert test.difficulty == "mixed"
    assert {q.difficulty for q in test.questions} == {"Moderate"}


def test_explicit_mixed_difficulty_spreads_levels(client, db, auth_headers):
    response = client.post("/api/mock-tests/generate", headers=auth_headers,
                           json={"difficulty": "mixed", "questionCount": 100})
    test = db.get(MockTest, response.json()["data"]["testId"])
    assert {q.difficulty for q in test.questions} <= {"Easy", "Moderate", "Hard"}
    assert len({q.difficulty for q in test.questions}) > 1


def test_subject_counts_follow_question_bank(client, history_test):
    subjects = {s["name"]: s["count"] for s in client.get("/api/mock-tests/subjects").json()["data"]}
    assert subjects["History"] == 5
    assert subjects["All Subjects"] == 5
    assert subjects["Geography"] == 398


def test_questions_hide_answers(client, auth_headers, history_test):
    data = client.get(f"/api/mock-tests/{history_test['testId']}/questions", headers=auth_headers).json()["data"]
    assert len(data["questions"]) == 5
    assert data["duration"] == 8
    for question in data["questions"]:
        assert "correctOption" not in question
        assert "explanation" not in question


def test_unknown_test(client, auth_headers):
    response = client.get("/api/mock-tests/nope/questions", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Test not found"

    results = client.get("/api/mock-tests/nope/results", headers=auth_headers)
    assert results.json()["message"] == "No completed attempt found"


def test_submit_scores_with_negative_marking(client, db, auth_headers, history_test):
    test_id = history_test["testId"]
    key = answer_key(db, test_id)
    answers = {
        key[0][0]: key[0][1],
        key[1][0]: key[1][1],
        key[2][0]: key[2][1],
        key[3][0]: wrong_option(key[3][1]),
    }

    response = client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers,
                           json={"answers": answers, "timeTaken": 420})
    assert response.status_code == 200
    assert response.json()["data"]["testId"] == test_id

    results = client.get(f"/api/mock-tests/{test_id}/results", headers=auth_headers).json()["data"]
    assert results["score"] == 5.3
    assert results["correctCount"] == 3
    assert results["wrongCount"] == 1
    assert results["skippedCount"] == 1
    assert results["accuracy"] == 75.0
    assert results["timeTaken"] == 420
    assert results["subjectWise"] == {"History": {"correct": 3, "wrong": 1, "total": 5}}
    assert "1 incorrect answers resulted in negative marking" in results["analysis"]
    assert results["title"] == "History - prelims Practice"
    assert [q["isCorrect"] for q in results["questions"]] == [True, True, True, False, False]
    assert results["questions"][4]["selectedOption"] is None


def test_score_never_negative(client, db, auth_headers, history_test):
    test_id = history_test["testId"]
    answers = {qid: wrong_option(correct) for qid, correct in answer_key(db, test_id)}

    client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers, json={"answers": answers})

    results = client.get(f"/api/mock-tests/{test_id}/results", headers=auth_headers).json()["data"]
    assert results["score"] == 0
    assert results["accuracy"] == 0


def test_submit_with_null_or_fractional_time(client, db, auth_headers, history_test):
    test_id = history_test["testId"]

    response = client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers,
                           json={"answers": {}, "timeTaken": None})
    assert response.status_code == 200
    attempt = db.get(MockTestAttempt, response.json()["data"]["attemptId"])
    assert attempt.time_taken == 0

    response = client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers,
                           json={"answers": {}, "timeTaken": 95.6})
    assert response.status_code == 200
    attempt = db.get(MockTestAttempt, response.json()["data"]["attemptId"])
    assert attempt.time_taken == 96


def test_saved_draft_is_completed_on_submit(client, db, auth_headers, history_test):
    test_id = history_test["testId"]
    key = answer_key(db, test_id)

    saved = client.put(f"/api/mock-tests/{test_id}/save-progress", headers=auth_headers,
                       json={"answers": {key[0][0]: "A"}})
    assert saved.json() == {"status": "success", "message": "Progress saved"}
    client.put(f"/api/mock-tests/{test_id}/save-progress", headers=auth_headers,
               json={"answers": {key[0][0]: "B", key[1][0]: None}})

    draft = db.query(MockTestAttempt).one()
    assert draft.completed_at is None
    assert draft.answers == {key[0][0]: "B"}

    submitted = client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers,
                            json={"answers": {qid: correct for qid, correct in key}}).json()["data"]
    assert submitted["attemptId"] == draft.id

    db.expire_all()
    assert db.query(MockTestAttempt).count() == 1
    assert db.query(MockTestAttempt).one().completed_at is not None


def test_results_pdf(client, db, auth_headers, history_test):
    test_id = history_test["testId"]
    client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers, json={"answers": {}})

    response = client.get(f"/api/mock-tests/{test_id}/results/pdf", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_recommendations(client, db, auth_headers, history_test):
    test_id = history_test["testId"]
    url = f"/api/mock-tests/{test_id}/recommendations"

    before = client.get(url, headers=auth_headers).json()["data"]
    assert [r["type"] for r in before["recommendations"]] == ["mcq", "answer"]
    assert before["streak"] == {"currentStreak": 0}

    answers = {qid: wrong_option(correct) for qid, correct in answer_key(db, test_id)}
    client.post(f"/api/mock-tests/{test_id}/submit", headers=auth_headers, json={"answers": answers})

    after = client.get(url, headers=auth_headers).json()["data"]
    assert [r["type"] for r in after["recommendations"]] == ["study", "practice", "mcq", "answer"]


def test_analysis_text():
    subject_wise = {"Economy": {"correct": 1, "wrong": 3, "total": 4}, "History": {"correct": 4, "total": 4}}
    assert weak_subjects(subject_wise) == ["Economy"]

    text = build_analysis(5, 3, 0, 8, subject_wise)
    assert text.startswith("You answered 5 out of 8 questions correctly (63% accuracy). ")
    assert "Areas needing improvement: Economy. " in text
    assert "unattempted" not in text
    assert text.endswith("Keep practicing regularly to improve your scores.")
