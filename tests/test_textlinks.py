import pytest

from database_init import db
from models.textlink import CustomDomain, ManagedWebsite, Textlink, resolve_placement
from models.website import Website
from util.exceptions import ValidationError


@pytest.fixture
def website(app):
    website = Website(url="https://example.com", title="Example")
    db.session.add(website)
    db.session.commit()
    return website


def test_resolve_placement():
    assert resolve_placement(5, None) == ManagedWebsite(5)
    assert resolve_placement(None, " shop.example.com ") == CustomDomain("shop.example.com")
    with pytest.raises(ValidationError):
        resolve_placement(None, "  ")
    with pytest.raises(ValidationError):
        resolve_placement(5, "shop.example.com")


def test_create_requires_exactly_one_placement(client, login, website):
    login("editor")
    base = {"link": "https://partner.net", "anchor_text": "Partner"}

    neither = client.post("/api/admin/textlinks", json=base)
    both = client.post(
        "/api/admin/textlinks",
        json={**base, "website_id": website.id, "custom_domain": "example.org"},
    )

    assert neither.status_code == 400
    assert "website_id" in neither.get_json()["details"]
    assert both.status_code == 400
    assert Textlink.query.count() == 0


def test_create_with_unknown_website_is_404(client, login, website):
    login("editor")
    resp = client.post(
        "/api/admin/textlinks",
        json={"link": "https://partner.net", "anchor_text": "Partner", "website_id": 999},
    )
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Website not found"


def test_create_sets_audit_fields_and_page_rules(client, login, website):
    user = login("editor")
    resp = client.post(
        "/api/admin/textlinks",
        json={
            "link": "https://partner.net",
            "anchor_text": "Partner",
            "custom_domain": "blog.example.org",
            "show_on_all_pages": False,
            "include_paths": "/blog\n/news",
        },
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["custom_domain"] == "blog.example.org"
    assert data["website_id"] is None
    assert data["target"] == "_blank"
    assert data["include_path_list"] == ["/blog", "/news"]
    assert data["created_by"] == user.id
    assert data["updated_by"] == user.id


def test_show_on_all_pages_clears_paths(client, login, website):
    login("editor")
    created = client.post(
        "/api/admin/textlinks",
        json={
            "link": "https://partner.net",
            "anchor_text": "Partner",
            "website_id": website.id,
            "show_on_all_pages": False,
            "exclude_paths": "/checkout",
        },
    ).get_json()["data"]

    resp = client.put(f"/api/admin/textlinks/{created['id']}", json={"show_on_all_pages": True})

    data = resp.get_json()["data"]
    assert data["show_on_all_pages"] is True
    assert data["exclude_paths"] is None


def test_update_switches_placement(client, login, website):
    login("editor")
    created = client.post(
        "/api/admin/textlinks",
        json={"link": "https://partner.net", "anchor_text": "Partner", "website_id": website.id},
    ).get_json()["data"]
    assert created["websites"]["url"] == "https://example.com"

    resp = client.put(
        f"/api/admin/textlinks/{created['id']}", json={"custom_domain": "other.org"}
    )

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["website_id"] is None
    assert data["custom_domain"] == "other.org"
    assert data["anchor_text"] == "Partner"


def test_list_filters_and_search(client, login, website):
    login("viewer")
    db.session.add_all(
        [
            Textlink(link="https://a.net", anchor_text="Alpha", website_id=website.id),
            Textlink(link="https://b.net", anchor_text="Beta", custom_domain="b.org"),
            Textlink(link="https://c.net", anchor_text="Gamma", custom_domain="c.org"),
        ]
    )
    db.session.commit()

    by_site = client.get(f"/api/admin/textlinks?website_id={website.id}").get_json()
    searched = client.get("/api/admin/textlinks?search=gam").get_json()
    sorted_asc = client.get("/api/admin/textlinks?sort=anchor_text&order=asc&limit=2").get_json()

    assert [t["anchor_text"] for t in by_site["data"]] == ["Alpha"]
    assert [t["anchor_text"] for t in searched["data"]] == ["Gamma"]
    assert [t["anchor_text"] for t in sorted_asc["data"]] == ["Alpha", "Beta"]
    assert sorted_asc["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }


def test_delete_requires_admin(client, login, website):
    db.session.add(Textlink(link="https://a.net", anchor_text="Alpha", custom_domain="a.org"))
    db.session.commit()
    textlink_id = Textlink.query.first().id

    login("editor")
    assert client.delete(f"/api/admin/textlinks/{textlink_id}").status_code == 401

    login("admin")
    assert client.delete(f"/api/admin/textlinks/{textlink_id}").status_code == 200
    assert client.get(f"/api/admin/textlinks/{textlink_id}").status_code == 404


def test_database_rejects_textlink_without_placement(app):
    from sqlalchemy.exc import IntegrityError

    db.session.add(Textlink(link="https://a.net", anchor_text="Orphan"))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
