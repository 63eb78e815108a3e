# tests/test_search_api.py

import httpx

from tests.factories import search_response, search_result


def add_matrix(fake_tmdb):
    fake_tmdb.add(
        "search/multi",
        search_response([search_result(603, title="The Matrix", poster_path="/m.jpg")]),
    )
    fake_tmdb.add(
        "movie/603/watch/providers",
        {"results": {"US": {"flatrate": [{"provider_id": 8, "provider_name": "Netflix"}]}}},
    )


def test_search_returns_camel_case_page_with_cache_headers(client, fake_tmdb):
    add_matrix(fake_tmdb)

    response = client.get("/search", params={"q": "matrix"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public,max-age=300"
    assert response.headers["x-cache"] == "MISS"
    assert response.headers["etag"].startswith('"')

    body = response.json()
    assert body["page"] == 1
    assert body["totalPages"] == 1
    assert body["totalResults"] == 1
    item = body["results"][0]
    assert item["mediaType"] == "movie"
    assert item["posterUrl"] == "https://image.tmdb.org/t/p/w342/m.jpg"
    assert item["source"] == "Netflix"
    assert item["releaseDate"] == "2021-06-15"


def test_second_request_is_cache_hit_with_same_etag(client, fake_tmdb):
    add_matrix(fake_tmdb)

    first = client.get("/search", params={"q": "matrix", "type": "media"})
    second = client.get("/search", params={"q": "matrix"})

    assert second.headers["x-cache"] == "HIT"
    assert second.headers["etag"] == first.headers["etag"]
    assert second.json()["results"] == first.json()["results"]


def test_matching_if_none_match_returns_304(client, fake_tmdb):
    add_matrix(fake_tmdb)
    etag = client.get("/search", params={"q": "matrix"}).headers["etag"]

    response = client.get("/search", params={"q": "matrix"}, headers={"If-None-Match": f"W/{etag}"})

    assert response.status_code == 304
    assert response.content == b""
    assert response.headers["etag"] == etag


def test_stale_if_none_match_returns_body(client, fake_tmdb):
    add_matrix(fake_tmdb)

    response = client.get("/search", params={"q": "matrix"}, headers={"If-None-Match": '"stale"'})

    assert response.status_code == 200
    assert response.json()["results"]


def test_short_person_query_is_400(client):
    response = client.get("/search", params={"q": "abc", "type": "person"})

    assert response.status_code == 400
    assert "detail" in response.json()


def test_four_character_person_query_is_200(client, fake_tmdb):
    fake_tmdb.add("search/person", {"page": 1, "total_pages": 1, "results": []})

    response = client.get("/search", params={"q": "abcd", "type": "person"})

    assert response.status_code == 200
    assert response.json()["results"] == []


def test_single_character_keyword_is_empty_page(client, fake_tmdb):
    response = client.get("/search", params={"q": "x"})

    assert response.status_code == 200
    assert response.json() == {
        "results": [],
        "page": 1,
        "totalPages": 1,
        "totalResults": 0,
        "servedFromCache": False,
    }
    assert fake_tmdb.calls == []


def test_provider_outage_during_enrichment_still_200(client, fake_tmdb):
    fake_tmdb.add(
        "search/multi",
        search_response([search_result(i) for i in range(1, 6)]),
    )
    for i in range(1, 6):
        fake_tmdb.add(f"movie/{i}/watch/providers", httpx.Response(503))

    response = client.get("/search", params={"q": "outage"})

    assert response.status_code == 200
    assert all(item["source"] is None for item in response.json()["results"])


def test_provider_outage_during_search_is_502(client, fake_tmdb):
    fake_tmdb.add("search/multi", httpx.Response(503))

    response = client.get("/search", params={"q": "matrix"})

    assert response.status_code == 502


def test_details_preview(client, fake_tmdb):
    fake_tmdb.add(
        "tv/1399",
        {
            "id": 1399,
            "name": "Game of Thrones",
            "first_air_date": "2011-04-17",
            "genres": [{"id": i, "name": f"Genre {i}"} for i in range(7)],
            "credits": {"cast": [{"id": 1, "name": "Only Credits", "order": 0}]},
            "aggregate_credits": {
                "cast": [{"id": i, "name": f"Actor {i}", "order": 10 - i} for i in range(10)]
            },
            "watch/providers": {"results": {"DE": {"flatrate": [{"provider_name": "Sky"}]}}},
        },
    )

    response = client.get("/details", params={"id": 1399, "type": "tvshow"})

    assert response.status_code == 200
    body = response.json()
    assert body["media_type"] == "tv"
    assert body["title"] == "Game of Thrones"
    assert body["release_date"] == "2011-04-17"
    assert body["priority"] == 3
    assert body["watch_state"] == "unwatched"
    assert len(body["genres"]) == 5
    assert body["cast"] == [f"Actor {i}" for i in range(9, 1, -1)]
    assert body["available_on"] == "Sky"


def test_details_rejects_bad_input(client):
    assert client.get("/details", params={"id": 0, "type": "movie"}).status_code == 400
    assert client.get("/details", params={"id": 5, "type": "person"}).status_code == 400


def test_details_missing_upstream_is_502(client):
    response = client.get("/details", params={"id": 404, "type": "movie"})

    assert response.status_code == 502


def test_health(client):
    assert client.get("/system/health").json()["status"] == "healthy"


def test_empty_person_query_is_empty_page(client, fake_tmdb):
    response = client.get("/search", params={"q": "  ", "type": "person"})

    assert response.status_code == 200
    assert response.json()["results"] == []
    assert fake_tmdb.calls == []
