import pytest
from winefinder.engine import Engine
from winefinder.models import freeze_record
from winefinder_web.web import app as flask_app

@pytest.mark.e2e
def test_frontend_home_page_renders(monkeypatch):
    eng = Engine(); eng.build([freeze_record({"name": "Sigalas Santorini", "category": "White"})])

    import winefinder_web.web as webmod
    monkeypatch.setattr(webmod, "_engine", eng)

    client = flask_app.test_client()
    r = client.get("/")
    assert r.status_code == 200
    html = r.data.decode("utf-8", errors="ignore").lower()
    assert "wine finder" in html
    assert 'id="cat"' in html and 'list="wines"' in html
    # upload control hidden unless enabled
    assert '<div class="col hidden">' in html

    monkeypatch.setattr(webmod, "SHOW_UPLOAD", True)
    html = client.get("/").data.decode("utf-8", errors="ignore")
    assert '<div class="col hidden">' not in html

    eng.shutdown()
