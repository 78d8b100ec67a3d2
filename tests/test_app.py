"""
App-level routes and the error boundary
"""


class TestAppRoutes:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "Quill API is running..."

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestErrorBoundary:
    """Every failure is a {message} body"""

    def test_unknown_route(self, client):
        response = client.get("/api/nothing")
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    def test_malformed_path_parameter(self, client, author, auth_headers):
        response = client.put("/api/posts/abc/like", headers=auth_headers(author["token"]))
        assert response.status_code == 400
        assert "post_id" in response.json()["message"]

    def test_malformed_json_body(self, client, author, auth_headers):
        response = client.post(
            "/api/posts",
            content=b"{not json",
            headers={**auth_headers(author["token"]), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert set(response.json()) == {"message"}


HUGE_ID = "99999999999999999999"


class TestOversizedNumbers:
    """Numbers past the 64-bit range are client errors, never a 500"""

    def test_huge_page_number_is_an_empty_page(self, client, author, category, make_post):
        make_post(author["token"], category["id"])
        response = client.get(f"/api/posts?pageNumber={HUGE_ID}")
        assert response.status_code == 200
        body = response.json()
        assert body["posts"] == []
        assert body["pages"] == 1

    def test_huge_category_filter(self, client):
        response = client.get(f"/api/posts?category={HUGE_ID}")
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid category id"}

    def test_huge_path_ids(self, client, author, auth_headers):
        headers = auth_headers(author["token"])
        responses = [
            client.get(f"/api/posts/{HUGE_ID}/related"),
            client.get(f"/api/posts/{HUGE_ID}", headers=headers),
            client.put(f"/api/posts/{HUGE_ID}/like", headers=headers),
            client.get(f"/api/comments/{HUGE_ID}"),
            client.get(f"/api/users/{HUGE_ID}"),
            client.put(f"/api/users/profile/bookmarks/{HUGE_ID}", headers=headers),
        ]
        for response in responses:
            assert response.status_code == 400
            assert set(response.json()) == {"message"}

    def test_zero_and_negative_path_ids(self, client):
        assert client.get("/api/users/0").status_code == 400
        assert client.get("/api/posts/-1/related").status_code == 400

    def test_huge_ids_in_request_bodies(self, client, author, category, make_post, auth_headers):
        headers = auth_headers(author["token"])
        response = client.post("/api/posts", json={
            "title": "Big",
            "excerpt": "x",
            "content": "y",
            "imageUrl": "https://images.example.com/big.png",
            "category": int(HUGE_ID),
        }, headers=headers)
        assert response.status_code == 400

        post = make_post(author["token"], category["id"])
        response = client.post(
            f"/api/comments/{post['id']}",
            json={"text": "hi", "parentId": int(HUGE_ID)},
            headers=headers,
        )
        assert response.status_code == 400
