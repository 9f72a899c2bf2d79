"""HTTP tests for the job, bid and award endpoints."""

import pytest


@pytest.fixture
def job_id(client):
    response = client.post(
        "/jobs/",
        json={"customer_id": "cust-1", "title": "Fence panel weld", "city": "Austin", "state": "TX"},
    )
    assert response.status_code == 201
    return response.json()["id"]


def place_bid(client, job_id, business_id, amount, notes=None):
    return client.post(
        f"/jobs/{job_id}/bids",
        json={"business_id": business_id, "amount": amount, "notes": notes},
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_post_job(client, job_id):
    job = client.get(f"/jobs/{job_id}").json()

    assert job["status"] == "open"
    assert job["winning_bid_id"] is None
    assert job["city"] == "Austin"


def test_post_job_without_title(client):
    response = client.post("/jobs/", json={"customer_id": "cust-1", "title": ""})

    assert response.status_code == 400


def test_unknown_job_is_404(client):
    assert client.get("/jobs/missing").status_code == 404
    assert client.get("/jobs/missing/bids").status_code == 404
    assert client.post("/jobs/missing/award").status_code == 404


def test_bid_and_award_flow(client, dispatcher, job_id):
    for business_id, amount in [("biz-a", "100"), ("biz-b", "200"), ("biz-c", "300")]:
        assert place_bid(client, job_id, business_id, amount).status_code == 201

    bids = client.get(f"/jobs/{job_id}/bids").json()
    assert bids["status"] == "bidding"
    assert bids["count"] == 3
    assert bids["mean"] == "200.00"

    response = client.post(f"/jobs/{job_id}/award")

    assert response.status_code == 200
    body = response.json()
    assert body["business_id"] == "biz-b"
    assert body["amount"] == "200.00"
    assert body["already_awarded"] is False
    assert dispatcher.send.call_count == 2

    again = client.post(f"/jobs/{job_id}/award").json()
    assert again["winning_bid_id"] == body["winning_bid_id"]
    assert again["already_awarded"] is True

    assert client.get(f"/jobs/{job_id}").json()["status"] == "awarded"


def test_award_without_bids_is_conflict(client, job_id):
    response = client.post(f"/jobs/{job_id}/award")

    assert response.status_code == 409
    assert "no bids" in response.json()["detail"]


def test_duplicate_bid_is_conflict(client, job_id):
    place_bid(client, job_id, "biz-a", "150")

    response = place_bid(client, job_id, "biz-a", "140")

    assert response.status_code == 409


def test_bid_after_award_is_conflict(client, job_id):
    place_bid(client, job_id, "biz-a", "150")
    client.post(f"/jobs/{job_id}/award")

    response = place_bid(client, job_id, "biz-b", "140")

    assert response.status_code == 409
    assert "no longer accepts bids" in response.json()["detail"]


@pytest.mark.parametrize("amount", ["0", "-5", "12.345", "1e30", "99999999999999999999.99", "1000000.01"])
def test_invalid_bid_amount(client, job_id, amount):
    assert place_bid(client, job_id, "biz-a", amount).status_code == 422


def test_business_views(client, job_id):
    place_bid(client, job_id, "biz-a", "100", notes="2 day turnaround")
    place_bid(client, job_id, "biz-b", "250")
    place_bid(client, job_id, "biz-c", "180")
    award = client.post(f"/jobs/{job_id}/award").json()
    assert award["business_id"] == "biz-c"

    my_bids = client.get("/businesses/biz-a/bids").json()
    assert len(my_bids) == 1
    assert my_bids[0]["outcome"] == "rejected"
    assert my_bids[0]["bid"]["notes"] == "2 day turnaround"

    won = client.get("/businesses/biz-c/won-jobs").json()
    assert [j["id"] for j in won] == [job_id]
    assert client.get("/businesses/biz-a/won-jobs").json() == []


def test_complete_job(client, job_id):
    place_bid(client, job_id, "biz-a", "100")
    client.post(f"/jobs/{job_id}/award")

    forbidden = client.patch(f"/jobs/{job_id}/complete", json={"business_id": "biz-z"})
    assert forbidden.status_code == 403

    response = client.patch(f"/jobs/{job_id}/complete", json={"business_id": "biz-a"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_job_board_and_customer_jobs(client, job_id):
    place_bid(client, job_id, "biz-a", "100")
    client.post(f"/jobs/{job_id}/award")
    other = client.post("/jobs/", json={"customer_id": "cust-1", "title": "Railing"}).json()

    board = [j["id"] for j in client.get("/jobs/").json()]
    assert board == [other["id"]]

    mine = {j["id"] for j in client.get("/customers/cust-1/jobs").json()}
    assert mine == {job_id, other["id"]}
