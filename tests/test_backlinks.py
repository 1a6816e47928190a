from database_init import db
from models.textlink import Textlink
from models.website import Website
from service.backlink_service import dedupe_textlinks, resolve_backlinks


def _website(url, title="Site"):
    website = Website(url=url, title=title)
    db.session.add(website)
    db.session.commit()
    return website


def _textlink(link, anchor, website=None, custom_domain=None, **kwargs):
    textlink = Textlink(
        link=link,
        anchor_text=anchor,
        website_id=website.id if website else None,
        custom_domain=custom_domain,
        **kwargs,
    )
    db.session.add(textlink)
    db.session.commit()
    return textlink


def test_matches_by_custom_domain_website_and_link(app):
    site = _website("https://www.example.com")
    _textlink("https://partner.net/a", "A", custom_domain="shop.example.com")
    _textlink("https://partner.net/b", "B", website=site)
    _textlink("https://example.com/promo", "C", custom_domain="other.org")
    _textlink("https://unrelated.io", "D", custom_domain="unrelated.io")

    result = resolve_backlinks("https://www.Example.com/")

    anchors = [row["textlink"] for row in result["data"]]
    assert anchors == ["A", "B", "C"]
    assert result["pagination"]["total"] == 3


def test_textlink_matching_several_ways_appears_once(app):
    site = _website("https://example.com")
    # Khớp cả theo website lẫn theo link
    _textlink("https://example.com/page", "Twice", website=site)

    result = resolve_backlinks("example.com")

    assert [row["textlink"] for row in result["data"]] == ["Twice"]


def test_subdomain_request_matches_base_domain_custom_domain(app):
    _textlink("https://partner.net", "Base", custom_domain="example.com")

    result = resolve_backlinks("blog.example.com")

    assert [row["textlink"] for row in result["data"]] == ["Base"]


def test_pagination_slices_merged_list(app):
    for i in range(5):
        _textlink(f"https://partner.net/{i}", f"L{i}", custom_domain="example.com")

    result = resolve_backlinks("example.com", page=2, limit=2)

    assert [row["textlink"] for row in result["data"]] == ["L2", "L3"]
    assert result["pagination"]["totalPages"] == 3
    assert result["pagination"]["hasNext"] is True


def test_backlink_shape_defaults(app):
    _textlink("https://partner.net", "Anchor", custom_domain="example.com", target=None, rel=None)

    row = resolve_backlinks("example.com")["data"][0]

    assert row == {
        "url": "https://partner.net",
        "textlink": "Anchor",
        "title": "Anchor",
        "rel": "",
        "target": "_blank",
    }


def test_dedupe_keeps_first_occurrence():
    class Row:
        def __init__(self, id, link="l", anchor_text="a"):
            self.id = id
            self.link = link
            self.anchor_text = anchor_text

    rows = [Row(3), Row(1), Row(3), Row(None, "x", "y"), Row(None, "x", "y")]
    unique = dedupe_textlinks(rows)
    assert [r.id for r in unique] == [3, 1, None]


def test_public_endpoint_requires_domain(client):
    resp = client.get("/api/public/backlinks")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Invalid query parameters"
    assert "domain" in body["details"]


def test_public_endpoint_rejects_non_integer_page(client):
    resp = client.get("/api/public/backlinks?domain=example.com&page=abc")
    assert resp.status_code == 400
    assert "page" in resp.get_json()["details"]


def test_public_endpoint_headers(client):
    resp = client.get(
        "/api/public/backlinks?domain=example.com", headers={"Origin": "https://example.com"}
    )
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "public, max-age=300"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.get_json()["pagination"]["limit"] == 100


def test_website_textlink_backlinks_end_to_end(client, login):
    login("editor")

    resp = client.post(
        "/api/admin/websites",
        json={"url": "https://www.example.com", "title": "Example"},
    )
    assert resp.status_code == 201
    website_id = resp.get_json()["data"]["id"]

    resp = client.post(
        "/api/admin/textlinks",
        json={
            "link": "https://partner.net/landing",
            "anchor_text": "Best partner",
            "website_id": website_id,
            "rel": "nofollow",
        },
    )
    assert resp.status_code == 201

    resp = client.get("/api/public/backlinks?domain=https://www.example.com/")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == [
        {
            "url": "https://partner.net/landing",
            "textlink": "Best partner",
            "title": "Best partner",
            "rel": "nofollow",
            "target": "_blank",
        }
    ]


def test_minimal_textlink_gets_default_projection(client, login):
    login("editor")
    website_id = client.post(
        "/api/admin/websites", json={"url": "https://x.com", "title": "X", "category": "blog"}
    ).get_json()["data"]["id"]
    client.post(
        "/api/admin/textlinks",
        json={"link": "https://y.com", "anchor_text": "Y", "website_id": website_id},
    )

    data = client.get("/api/public/backlinks?domain=x.com").get_json()["data"]

    assert data == [{"url": "https://y.com", "textlink": "Y", "title": "Y", "rel": "", "target": "_blank"}]


def test_domain_that_normalizes_to_empty_is_rejected(client, app):
    _textlink("https://partner.net", "Anchor", custom_domain="example.com")

    for domain in ("https://", "/", "www."):
        resp = client.get(f"/api/public/backlinks?domain={domain}")
        assert resp.status_code == 400
        assert resp.get_json()["details"] == {"domain": ["Domain is required"]}
