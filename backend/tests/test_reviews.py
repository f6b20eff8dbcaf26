from datetime import datetime, timedelta

from conftest import auth_headers


async def test_review_after_finished_stay(client, guest, host, make_listing, make_booking):
    listing = await make_listing(host)
    booking = await make_booking(
        guest, listing, check_in=datetime.utcnow() - timedelta(days=5), nights=2
    )

    res = await client.post(
        "/api/reviews",
        json={"bookingId": booking.id, "rating": 5, "comment": "Lovely"},
        headers=auth_headers(guest),
    )
    assert res.status_code == 200
    assert res.json()["id"]

    again = await client.post(
        "/api/reviews",
        json={"bookingId": booking.id, "rating": 4, "comment": "Still lovely"},
        headers=auth_headers(guest),
    )
    assert again.status_code == 400
    assert again.json() == {"error": "Already reviewed this booking"}

    listed = await client.get("/api/reviews", params={"listingId": listing.id})
    assert listed.status_code == 200
    rows = listed.json()
    assert len(rows) == 1
    assert rows[0]["userName"] == "Guest"
    assert rows[0]["rating"] == 5


async def test_review_before_checkout_is_rejected(client, guest, host, make_listing, make_booking):
    booking = await make_booking(guest, await make_listing(host))

    res = await client.post(
        "/api/reviews",
        json={"bookingId": booking.id, "rating": 5, "comment": "Early"},
        headers=auth_headers(guest),
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Stay not completed"}


async def test_review_of_someone_elses_booking(client, guest, host, make_user, make_listing, make_booking):
    booking = await make_booking(
        guest, await make_listing(host), check_in=datetime.utcnow() - timedelta(days=5)
    )

    res = await client.post(
        "/api/reviews",
        json={"bookingId": booking.id, "rating": 1, "comment": "Hm"},
        headers=auth_headers(await make_user()),
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid booking"}


async def test_direct_listing_review_once_per_user(client, guest, host, make_listing):
    listing = await make_listing(host)
    body = {"listingId": listing.id, "rating": 3, "comment": "Fine"}

    first = await client.post("/api/reviews", json=body, headers=auth_headers(guest))
    assert first.status_code == 200

    second = await client.post("/api/reviews", json=body, headers=auth_headers(guest))
    assert second.status_code == 400

    missing = await client.post(
        "/api/reviews",
        json={**body, "listingId": "nope"},
        headers=auth_headers(guest),
    )
    assert missing.json() == {"error": "Invalid listing"}


async def test_review_validation(client, guest):
    no_target = await client.post(
        "/api/reviews", json={"rating": 4, "comment": "x"}, headers=auth_headers(guest)
    )
    assert no_target.status_code == 400
    assert no_target.json() == {"error": "Either bookingId or listingId is required"}

    out_of_range = await client.post(
        "/api/reviews",
        json={"listingId": "l1", "rating": 6, "comment": "x"},
        headers=auth_headers(guest),
    )
    assert out_of_range.status_code == 400

    anonymous = await client.post("/api/reviews", json={"listingId": "l1", "rating": 4, "comment": "x"})
    assert anonymous.status_code == 401


async def test_list_reviews_requires_listing_id(client):
    res = await client.get("/api/reviews")
    assert res.status_code == 400
