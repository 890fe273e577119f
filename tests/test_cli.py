import json

from listing_scraper import cli
from listing_scraper.models import ListingRecord, PageResult, ScrapeStatus

URL = "https://www.airbnb.com.br/s/Rio/homes?checkin=2099-01-10&checkout=2099-01-15"


def test_missing_env_var_exits_nonzero(monkeypatch):
    monkeypatch.delenv("AIRBNB_URL", raising=False)
    assert cli.main([]) == 1


def test_unparsable_url_exits_nonzero(monkeypatch):
    monkeypatch.setenv("AIRBNB_URL", "airbnb rio")
    assert cli.main([]) == 1


def test_past_checkin_exits_nonzero(monkeypatch):
    monkeypatch.setenv("AIRBNB_URL", "https://www.airbnb.com.br/s/Rio/homes?checkin=2001-01-01")
    assert cli.main([]) == 1


def test_negative_page_exits_nonzero(monkeypatch):
    monkeypatch.setenv("AIRBNB_URL", URL)
    assert cli.main(["--page", "-2"]) == 1


def test_run_prints_summary(monkeypatch, capsys):
    monkeypatch.setenv("SEARCH_URL", URL)
    seen = {}

    async def fake_run_once(config, request, logger):
        seen["request"] = request
        return PageResult(
            requested_url=request.base_url,
            records=[ListingRecord(room_id="1", title="Loft", price=100.0, availables_count=40, position=1)],
            status=ScrapeStatus.EXTRACTED,
            available_count=40,
            element_text="40 acomodações",
            loaded_count=1,
        )

    monkeypatch.setattr(cli, "run_once", fake_run_once)

    assert cli.main(["--url-env", "SEARCH_URL", "--page", "0"]) == 0
    assert seen["request"].base_url == URL

    out = capsys.readouterr().out
    assert "Final result" in out
    assert "Accommodations loaded on the page: 1" in out
    summary = json.loads(out[out.index("{"):out.rindex("}") + 1])
    assert summary["accommodations"][0]["title"] == "Loft"


def test_run_failure_exits_nonzero(monkeypatch):
    monkeypatch.setenv("AIRBNB_URL", URL)

    async def broken_run_once(config, request, logger):
        raise RuntimeError("Executable doesn't exist")

    monkeypatch.setattr(cli, "run_once", broken_run_once)
    assert cli.main([]) == 1
