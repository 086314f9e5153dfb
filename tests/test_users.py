"""User profile and discovery tests."""


def test_get_own_profile(client, auth_headers, create_post):
    create_post(auth_headers)
    create_post(auth_headers, "second")

    response = client.get("/api/users/profile/me", headers=auth_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == auth_headers.user_id
    assert user["email"] == "test@example.com"
    assert user["postCount"] == 2
    assert "password_hash" not in user


def test_get_user_profile(client, auth_headers, other_headers, create_post):
    create_post(other_headers)

    response = client.get(f"/api/users/{other_headers.user_id}", headers=auth_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Other User"
    assert user["postCount"] == 1


def test_get_missing_user(client, auth_headers):
    response = client.get("/api/users/999999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "USER_NOT_FOUND"


def test_get_user_with_malformed_id(client, auth_headers):
    response = client.get("/api/users/not-an-id", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_USER_ID"


def test_update_profile_partial(client, auth_headers):
    """Test updating only some profile fields."""
    response = client.put(
        "/api/users/profile", headers=auth_headers, json={"bio": "Building things"}
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["bio"] == "Building things"
    assert user["name"] == "Test User"

    response = client.put(
        "/api/users/profile",
        headers=auth_headers,
        json={"name": "  Renamed  ", "avatar_url": "https://example.com/me.png"},
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Renamed"
    assert user["bio"] == "Building things"
    assert user["avatar_url"] == "https://example.com/me.png"


def test_update_profile_reflected_in_posts(client, auth_headers, create_post):
    post = create_post(auth_headers)
    client.put("/api/users/profile", headers=auth_headers, json={"name": "New Name"})

    response = client.get(f"/api/posts/{post['id']}", headers=auth_headers)
    assert response.json()["post"]["user_name"] == "New Name"


def test_update_profile_without_fields(client, auth_headers):
    response = client.put("/api/users/profile", headers=auth_headers, json={})
    assert response.status_code == 400
    assert response.json()["error"] == "NO_UPDATE_FIELDS"


def test_update_profile_validation(client, auth_headers):
    response = client.put("/api/users/profile", headers=auth_headers, json={"bio": "x" * 501})
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_FAILED"

    response = client.put("/api/users/profile", headers=auth_headers, json={"name": "   "})
    assert response.status_code == 400


def test_update_profile_ignores_email_and_password(client, auth_headers):
    response = client.put(
        "/api/users/profile",
        headers=auth_headers,
        json={"bio": "hi", "email": "hijack@example.com", "password": "Zz9!zzzz"},
    )
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "test@example.com"

    login = client.post(
        "/api/auth/login", json={"email": "test@example.com", "password": "Aa1!aaaa"}
    )
    assert login.status_code == 200


def test_update_own_profile_by_id(client, auth_headers):
    response = client.put(
        f"/api/users/{auth_headers.user_id}", headers=auth_headers, json={"bio": "by id"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["bio"] == "by id"


def test_update_other_profile_by_id(client, auth_headers, other_headers):
    response = client.put(
        f"/api/users/{other_headers.user_id}", headers=auth_headers, json={"bio": "hacked"}
    )
    assert response.status_code == 403
    assert response.json()["error"] == "UNAUTHORIZED_UPDATE"

    other = client.get(f"/api/users/{other_headers.user_id}", headers=auth_headers)
    assert other.json()["user"]["bio"] is None


def test_list_users(client, auth_headers, other_headers, register_user, create_post):
    register_user(name="Alice", email="alice@example.com")
    create_post(other_headers)

    response = client.get("/api/users", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert [user["name"] for user in data["users"]] == ["Alice", "Other User", "Test User"]
    assert [user["postCount"] for user in data["users"]] == [0, 1, 0]
    assert data["pagination"]["totalUsers"] == 3
    assert data["pagination"]["totalPages"] == 1


def test_list_users_paginates(client, auth_headers, register_user):
    for i in range(4):
        register_user(name=f"Member {i}", email=f"member{i}@example.com")

    response = client.get("/api/users?page=2&limit=2", headers=auth_headers)
    data = response.json()
    assert [user["name"] for user in data["users"]] == ["Member 2", "Member 3"]
    assert data["pagination"]["hasNext"] is True
    assert data["pagination"]["hasPrevious"] is True
    assert data["pagination"]["totalUsers"] == 5


def test_search_users(client, auth_headers, register_user):
    register_user(name="Grace Hopper", email="grace@navy.mil")
    register_user(name="Alan Turing", email="alan@example.com")

    by_name = client.get("/api/users?search=HOPPER", headers=auth_headers).json()
    assert [user["name"] for user in by_name["users"]] == ["Grace Hopper"]
    assert by_name["pagination"]["totalUsers"] == 1

    by_email = client.get("/api/users?search=navy", headers=auth_headers).json()
    assert [user["name"] for user in by_email["users"]] == ["Grace Hopper"]

    nobody = client.get("/api/users?search=zzz", headers=auth_headers).json()
    assert nobody["users"] == []
    assert nobody["pagination"]["totalUsers"] == 0


def test_get_user_posts(client, auth_headers, other_headers, create_post):
    mine = create_post(auth_headers, "mine")
    create_post(other_headers, "theirs")
    newer = create_post(auth_headers, "mine again")

    response = client.get(f"/api/users/{auth_headers.user_id}/posts", headers=other_headers)
    assert response.status_code == 200
    data = response.json()
    assert [post["id"] for post in data["posts"]] == [newer["id"], mine["id"]]
    assert data["pagination"]["totalPosts"] == 2


def test_get_posts_of_missing_user(client, auth_headers):
    response = client.get("/api/users/999999/posts", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "USER_NOT_FOUND"


def test_delete_account_cascades(client, auth_headers, other_headers, create_post):
    """Deleting an account removes its posts and invalidates its tokens."""
    mine = create_post(auth_headers)
    theirs = create_post(other_headers)

    response = client.delete("/api/users/profile", headers=auth_headers)
    assert response.status_code == 200

    assert client.get(f"/api/posts/{mine['id']}", headers=other_headers).status_code == 404
    assert client.get(f"/api/posts/{theirs['id']}", headers=other_headers).status_code == 200
    gone = client.get(f"/api/users/{auth_headers.user_id}", headers=other_headers)
    assert gone.status_code == 404

    stale = client.get("/api/posts", headers=auth_headers)
    assert stale.status_code == 401
    assert stale.json()["error"] == "USER_NOT_FOUND"

    feed = client.get("/api/posts", headers=other_headers).json()
    assert feed["pagination"]["totalPosts"] == 1


def test_deleted_email_can_register_again(client, auth_headers):
    client.delete("/api/users/profile", headers=auth_headers)
    response = client.post(
        "/api/auth/register",
        json={"name": "Again", "email": "test@example.com", "password": "Aa1!aaaa"},
    )
    assert response.status_code == 201


def test_list_users_far_beyond_end(client, auth_headers):
    response = client.get("/api/users?page=100000000000000000000", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["users"] == []
    assert data["pagination"]["hasNext"] is False
    assert data["pagination"]["totalUsers"] == 1

    posts = client.get(
        f"/api/users/{auth_headers.user_id}/posts?page=100000000000000000000",
        headers=auth_headers,
    )
    assert posts.status_code == 200
    assert posts.json()["posts"] == []
