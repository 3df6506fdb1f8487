from idcard.config import CardStyle
from idcard.fonts import FontBook
from idcard.fonts import google


def test_default_font_is_bundled():
    book = FontBook()
    assert book.path_for("bold") is None
    font = book.get("bold", 28)
    assert font.getlength("Participant Name") > 0


def test_fonts_are_cached_per_weight_and_size():
    book = FontBook()
    assert book.get("regular", 14) is book.get("regular", 14.2)
    assert book.get("regular", 14) is not book.get("regular", 28)


def test_larger_font_measures_wider():
    book = FontBook()
    assert book.get("regular", 28).getlength("Ada") > book.get("regular", 14).getlength("Ada")


def test_missing_font_file_falls_back(tmp_path):
    book = FontBook(CardStyle(font_path=tmp_path / "missing.ttf"))
    assert book.path_for("regular") is None
    assert book.path_for("bold") is None


def test_google_font_used_when_configured(tmp_path, monkeypatch):
    calls = []

    def fake_get_google_font(family, weight=400, cache_dir=None):
        calls.append((family, weight))
        return None

    monkeypatch.setattr("idcard.fonts.get_google_font", fake_get_google_font)
    book = FontBook(CardStyle(google_font="Inter"))

    assert book.path_for("semibold") is None
    assert book.path_for("semibold") is None
    assert calls == [("Inter", 600)]


def test_google_font_cache_hit_skips_download(tmp_path, monkeypatch):
    (tmp_path / "Inter-700.ttf").write_bytes(b"cached")

    def fail(*args, **kwargs):
        raise AssertionError("network used")

    monkeypatch.setattr(google.requests, "Session", fail)
    assert google.get_google_font("Inter", 700, cache_dir=tmp_path) == tmp_path / "Inter-700.ttf"


def test_extract_font_url_from_css():
    css = "@font-face {\n  font-family: 'Inter';\n  src: url(https://fonts.gstatic.com/s/inter/v1/abc.ttf) format('truetype');\n}"
    assert google._extract_font_url_from_css(css) == "https://fonts.gstatic.com/s/inter/v1/abc.ttf"
    assert google._extract_font_url_from_css("body {}") is None


class _FakeResponse:
    def __init__(self, text="", content=b""):
        self.text = text
        self.content = content

    def raise_for_status(self):
        pass


class _FakeSession:
    def __init__(self):
        self.headers = {}
        self.requested = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def get(self, url, params=None, timeout=None):
        self.requested.append((url, params))
        if url == google.CSS_API_URL:
            return _FakeResponse(text="src: url(https://fonts.gstatic.com/s/inter/v1/abc.ttf) format('truetype');")
        return _FakeResponse(content=b"ttf-bytes")


def test_google_font_downloaded_into_cache(tmp_path, monkeypatch):
    session = _FakeSession()
    monkeypatch.setattr(google.requests, "Session", lambda: session)

    path = google.get_google_font("Inter Tight", 600, cache_dir=tmp_path)

    assert path == tmp_path / "InterTight-600.ttf"
    assert path.read_bytes() == b"ttf-bytes"
    assert session.requested[0] == (google.CSS_API_URL, {"family": "Inter Tight:600", "display": "swap"})
    assert session.headers["User-Agent"] == google.USER_AGENT


def test_google_font_network_failure_returns_none(tmp_path, monkeypatch):
    class BrokenSession(_FakeSession):
        def get(self, url, params=None, timeout=None):
            raise google.requests.ConnectionError("offline")

    monkeypatch.setattr(google.requests, "Session", BrokenSession)
    assert google.get_google_font("Inter", 400, cache_dir=tmp_path) is None
    assert not (tmp_path / "Inter-400.ttf").exists()
