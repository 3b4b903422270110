from datetime import date, datetime, timedelta, timezone

import pytest

from claryon.models import BlogPost, BlogPostStatus
from claryon.routers.blog import generate_slug, published_filter


def _today() -> date:
    return datetime.now(timezone.utc).date()


# =============================================================================
# Publication gate
# =============================================================================

def test_public_listing_applies_publication_gate(client, make_post):
    visible = make_post(title="Visible")
    make_post(title="Draft", status=BlogPostStatus.DRAFT)
    make_post(title="Archived", status=BlogPostStatus.ARCHIVED)
    make_post(title="Scheduled", publication_date=_today() + timedelta(days=7))
    make_post(title="Undated", publication_date=None)

    response = client.get("/api/blog")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert [p["slug"] for p in body["posts"]] == [visible.slug]
    assert "body_content" not in body["posts"][0]


def test_post_dated_today_is_visible(client, make_post):
    post = make_post(publication_date=_today())

    assert client.get(f"/api/blog/{post.slug}").status_code == 200


def test_public_listing_is_newest_first(client, make_post):
    make_post(slug="older", publication_date=date(2024, 1, 1))
    make_post(slug="newest", publication_date=date(2024, 3, 1))
    make_post(slug="middle", publication_date=date(2024, 2, 1))

    slugs = [p["slug"] for p in client.get("/api/blog").json()["posts"]]

    assert slugs == ["newest", "middle", "older"]


def test_public_listing_pagination_and_tag_filter(client, make_post):
    for _ in range(3):
        make_post(tags=["strategy"])
    make_post(tags=["Finance", "news"])

    page = client.get("/api/blog?page=2&page_size=3").json()
    assert page["total"] == 4
    assert len(page["posts"]) == 1

    tagged = client.get("/api/blog?tag=finance").json()
    assert tagged["total"] == 1
    assert tagged["posts"][0]["tags"] == ["Finance", "news"]


def test_published_post_detail_by_slug_and_id(client, make_post):
    post = make_post(title="Tax planning")

    by_slug = client.get(f"/api/blog/{post.slug}")
    by_id = client.get(f"/api/blog/{post.id}")

    assert by_slug.status_code == 200
    assert by_slug.json()["title"] == "Tax planning"
    assert by_slug.json()["body_content"] == post.body_content
    assert by_id.json()["id"] == post.id


@pytest.mark.parametrize("overrides", [
    {"status": BlogPostStatus.DRAFT},
    {"status": BlogPostStatus.ARCHIVED},
    {"publication_date": None},
    {"publication_date": date(2999, 1, 1)},
])
def test_unpublished_post_detail_is_404(client, make_post, overrides):
    post = make_post(**overrides)

    assert client.get(f"/api/blog/{post.slug}").status_code == 404
    assert client.get(f"/api/blog/{post.id}").status_code == 404


def test_unknown_post_is_404(client, db):
    assert client.get("/api/blog/no-such-post").status_code == 404


def test_published_filter_accepts_reference_date(db, make_post):
    make_post(slug="june", publication_date=date(2024, 6, 1))

    as_of_may = published_filter(db.query(BlogPost), today=date(2024, 5, 1)).all()
    as_of_june = published_filter(db.query(BlogPost), today=date(2024, 6, 1)).all()

    assert as_of_may == []
    assert [p.slug for p in as_of_june] == ["june"]


# =============================================================================
# Slugs
# =============================================================================

@pytest.mark.parametrize("title, expected", [
    ("Navigating the New Wave!", "navigating-the-new-wave"),
    ("  Q3   results_and  outlook ", "q3-results-and-outlook"),
    ("Tax -- Planning 101", "tax-planning-101"),
])
def test_generate_slug(title, expected):
    assert generate_slug(title) == expected


# =============================================================================
# Admin CMS
# =============================================================================

def test_admin_endpoints_require_token(client, db):
    assert client.get("/api/admin/blog").status_code in (401, 403)
    assert client.post("/api/admin/blog", json={"title": "Hello world"}).status_code in (401, 403)


def test_admin_listing_includes_every_status(client, admin_headers, make_post):
    make_post()
    make_post(status=BlogPostStatus.DRAFT)
    make_post(publication_date=_today() + timedelta(days=30))

    all_posts = client.get("/api/admin/blog", headers=admin_headers).json()
    drafts = client.get("/api/admin/blog?status=draft", headers=admin_headers).json()

    assert len(all_posts) == 3
    assert len(drafts) == 1


def test_admin_search_matches_title(client, admin_headers, make_post):
    make_post(title="Cash flow basics")
    make_post(title="Hiring your first CFO")

    found = client.get("/api/admin/blog?search=cash", headers=admin_headers).json()

    assert [p["title"] for p in found] == ["Cash flow basics"]


def test_admin_can_read_draft(client, admin_headers, make_post):
    draft = make_post(status=BlogPostStatus.DRAFT)

    response = client.get(f"/api/admin/blog/{draft.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "draft"


def test_create_post_generates_slug_and_parses_tags(client, db, admin_headers):
    response = client.post("/api/admin/blog", headers=admin_headers, json={
        "title": "Navigating the New Wave!",
        "introduction": "What changes this year.",
        "tags": "strategy, growth , ",
        "body_content": {"type": "markdown", "text": "# Hello"},
    })

    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "navigating-the-new-wave"
    assert body["tags"] == ["strategy", "growth"]
    assert body["status"] == "draft"
    assert body["body_content_type"] == "markdown"
    assert body["body_content"] == {"type": "markdown", "text": "# Hello"}
    assert db.query(BlogPost).count() == 1


def test_created_draft_is_not_public_until_published(client, admin_headers):
    created = client.post("/api/admin/blog", headers=admin_headers, json={
        "title": "Coming soon",
        "publication_date": "2024-01-01",
    }).json()
    assert client.get(f"/api/blog/{created['slug']}").status_code == 404

    client.put(f"/api/admin/blog/{created['id']}", headers=admin_headers, json={"status": "published"})

    assert client.get(f"/api/blog/{created['slug']}").status_code == 200


def test_create_rejects_duplicate_slug(client, admin_headers, make_post):
    make_post(slug="already-here")

    response = client.post("/api/admin/blog", headers=admin_headers, json={
        "title": "Another post",
        "slug": "already-here",
    })

    assert response.status_code == 400


def test_malformed_slug_and_url_are_rejected(client, admin_headers, make_post):
    response = client.post("/api/admin/blog", headers=admin_headers, json={
        "title": "Another post",
        "slug": "Not A Slug",
        "hero_image_url": "ftp://example.com/hero.png",
    })

    assert response.status_code == 400
    assert {"slug", "hero_image_url"} <= set(response.json()["details"])

    post = make_post(hero_image_url="https://cdn.example.com/hero.png")
    updated = client.put(
        f"/api/admin/blog/{post.id}",
        headers=admin_headers,
        json={"hero_image_url": "javascript:alert(1)"},
    )
    assert updated.status_code == 400
    assert "hero_image_url" in updated.json()["details"]
    stored = client.get(f"/api/admin/blog/{post.id}", headers=admin_headers).json()
    assert stored["hero_image_url"] == "https://cdn.example.com/hero.png"


def test_create_rejects_title_without_sluggable_text(client, admin_headers):
    response = client.post("/api/admin/blog", headers=admin_headers, json={"title": "!!!"})

    assert response.status_code == 400


def test_update_changes_only_sent_fields(client, admin_headers, make_post):
    post = make_post(title="Original title", introduction="Keep me")

    response = client.put(f"/api/admin/blog/{post.id}", headers=admin_headers, json={"title": "New title"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "New title"
    assert body["introduction"] == "Keep me"
    assert body["slug"] == post.slug


def test_update_rejects_slug_taken_by_another_post(client, admin_headers, make_post):
    make_post(slug="taken-slug")
    post = make_post()

    response = client.put(f"/api/admin/blog/{post.id}", headers=admin_headers, json={"slug": "taken-slug"})
    own_slug = client.put(f"/api/admin/blog/{post.id}", headers=admin_headers, json={"slug": post.slug})

    assert response.status_code == 400
    assert own_slug.status_code == 200


def test_update_unknown_post_is_404(client, admin_headers):
    response = client.put("/api/admin/blog/missing", headers=admin_headers, json={"title": "Whatever"})

    assert response.status_code == 404


def test_delete_post(client, db, admin_headers, make_post):
    post = make_post()

    response = client.delete(f"/api/admin/blog/{post.id}", headers=admin_headers)

    assert response.status_code == 204
    assert client.get(f"/api/admin/blog/{post.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/admin/blog/{post.id}", headers=admin_headers).status_code == 404


def test_plain_text_body_is_stored_as_typed_document(client, db, admin_headers):
    created = client.post("/api/admin/blog", headers=admin_headers, json={
        "title": "Hello world",
        "body_content": "# Hello",
    })

    assert created.status_code == 201
    assert created.json()["body_content"] == {"type": "markdown", "text": "# Hello"}
    db.expire_all()
    assert db.query(BlogPost).one().body_content == {"type": "markdown", "text": "# Hello"}

    updated = client.put(f"/api/admin/blog/{created.json()['id']}", headers=admin_headers, json={
        "body_content_type": "html",
        "body_content": "<p>Hello</p>",
    })

    assert updated.json()["body_content"] == {"type": "html", "text": "<p>Hello</p>"}
    assert updated.json()["body_content_type"] == "html"


def test_update_body_keeps_existing_content_type(client, admin_headers, make_post):
    post = make_post(body_content_type="html", body_content={"type": "html", "text": "<p>Old</p>"})

    response = client.put(f"/api/admin/blog/{post.id}", headers=admin_headers, json={"body_content": "<p>New</p>"})

    assert response.json()["body_content"] == {"type": "html", "text": "<p>New</p>"}
