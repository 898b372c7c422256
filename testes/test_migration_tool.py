import csv
import os
import sys
from unittest.mock import MagicMock

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
import requests

from sanity_migration_tool.migration_tool import SanityMigrationTool, load_config

MISSING_FILE = "https://cdn.ex.com/missing.json"
IMAGE = "https://cdn.ex.com/photo.jpg"

ITEMS = [
    {"_id": "i1", "heading": "Broken", "slug": "broken", "description": "<p>d</p>", "rich-text": "<p>x</p>", "file-url": MISSING_FILE},
    {"_id": "i2", "heading": "Fine", "slug": "fine", "description": "<p>d</p>", "rich-text": "<p>y</p>", "image": {"url": IMAGE, "alt": "P"}},
    {"_id": "i3", "heading": "Plain", "slug": "plain", "description": "d", "rich-text": "<h1>z</h1>"},
]


@pytest.fixture(autouse=True)
def _reports_in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def make_response(json_data=None, status=200, content=b"", headers=None):
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.content = content
    resp.headers = headers or {}
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


def webflow_session(sites=None, collections=None, items=None):
    def fake_get(url, headers=None, params=None):
        if url.endswith("/sites"):
            return make_response(sites if sites is not None else [{"_id": "s1", "name": "Site"}])
        if url.endswith("/collections"):
            return make_response(collections if collections is not None else [{"_id": "c1", "name": "Posts"}])
        if "/items" in url:
            page = items if items is not None else ITEMS
            return make_response({"items": page[params["offset"]:params["offset"] + params["limit"]]})
        raise AssertionError(f"unexpected url {url}")

    session = MagicMock()
    session.get.side_effect = fake_get
    return session


def sanity_session():
    def fake_get(url, headers=None):
        if url == MISSING_FILE:
            return make_response(status=404)
        return make_response(content=b"jpeg", headers={"Content-Type": "image/jpeg"})

    def fake_post(url, headers=None, data=None, json=None):
        if "/assets/images/" in url:
            return make_response({"document": {"_id": "image-photo"}})
        if "/data/mutate/" in url:
            return make_response({"transactionId": "tx"})
        raise AssertionError(f"unexpected url {url}")

    session = MagicMock()
    session.get.side_effect = fake_get
    session.post.side_effect = fake_post
    return session


def make_config(tmp_path, **migration):
    return {
        "webflow": {"api_key": "wf"},
        "sanity": {"project_id": "proj", "dataset": "production", "token": "tok"},
        "migration": {
            "id_map_path": str(tmp_path / "id_map.csv"),
            "log_file": str(tmp_path / "migration.log"),
            **migration,
        },
    }


def make_tool(config, answers=("1", "1"), **sessions):
    answers = list(answers)
    return SanityMigrationTool(
        config,
        input_fn=lambda message: answers.pop(0),
        print_fn=lambda line: None,
        webflow_session=sessions.get("webflow", webflow_session()),
        sanity_session=sessions.get("sanity", sanity_session()),
    )


def written_ids(session):
    return [
        c.kwargs["json"]["mutations"][0]["createOrReplace"]["_id"]
        for c in session.post.call_args_list
        if "/data/mutate/" in c.args[0]
    ]


def test_end_to_end_asset_failure_is_isolated(tmp_path):
    sanity = sanity_session()
    tool = make_tool(make_config(tmp_path), sanity=sanity)

    report = tool.run()

    assert written_ids(sanity) == ["imported-i2", "imported-i3"]
    assert [(r.document_id, r.status) for r in report.results] == [
        ("imported-i1", "failed"),
        ("imported-i2", "ok"),
        ("imported-i3", "ok"),
    ]
    assert report.results[0].code == "ASSET_DOWNLOAD"

    upserted = [c.kwargs["json"]["mutations"][0]["createOrReplace"] for c in sanity.post.call_args_list if "/data/mutate/" in c.args[0]]
    assert upserted[0]["image"] == {"asset": {"_type": "reference", "_ref": "image-photo"}, "alt": "P"}
    assert "image" not in upserted[1] and "file" not in upserted[1]

    with open(tmp_path / "id_map.csv", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [(r["WebflowId"], r["SanityId"], r["Status"]) for r in rows] == [
        ("i1", "imported-i1", "failed"),
        ("i2", "imported-i2", "ok"),
        ("i3", "imported-i3", "ok"),
    ]


def test_operator_selection_drives_requests(tmp_path):
    wf = webflow_session(
        sites=[{"_id": "s1", "name": "One"}, {"_id": "s2", "name": "Two"}],
        collections=[{"_id": "c1", "name": "A"}, {"_id": "c9", "name": "B"}],
    )
    tool = make_tool(make_config(tmp_path, dry_run=True), answers=["x", "2", "2"], webflow=wf)

    tool.run()

    urls = [c.args[0] for c in wf.get.call_args_list]
    assert urls[1] == "https://api.webflow.com/sites/s2/collections"
    assert urls[2] == "https://api.webflow.com/collections/c9/items"


def test_dry_run_writes_nothing(tmp_path):
    sanity = sanity_session()
    tool = make_tool(make_config(tmp_path, dry_run=True), sanity=sanity)

    report = tool.run()

    assert report.skipped == 3
    sanity.get.assert_not_called()
    sanity.post.assert_not_called()


def test_limit_caps_the_number_of_documents(tmp_path):
    sanity = sanity_session()
    tool = make_tool(make_config(tmp_path, limit=1), sanity=sanity)

    report = tool.run()

    assert len(report.results) == 1
    with open(tmp_path / "id_map.csv", encoding="utf-8") as f:
        assert len(list(csv.DictReader(f))) == 1


def test_no_sites_stops_before_prompting(tmp_path):
    asked = []
    tool = SanityMigrationTool(
        make_config(tmp_path),
        input_fn=lambda message: asked.append(message) or "1",
        print_fn=lambda line: None,
        webflow_session=webflow_session(sites=[]),
        sanity_session=sanity_session(),
    )

    assert tool.run() is None
    assert asked == []


def test_no_items_stops_before_upload(tmp_path):
    sanity = sanity_session()
    tool = make_tool(make_config(tmp_path), webflow=webflow_session(items=[]), sanity=sanity)

    assert tool.run() is None
    sanity.post.assert_not_called()


def test_item_without_id_is_reported_and_skipped(tmp_path):
    sanity = sanity_session()
    items = [{"heading": "no id"}, ITEMS[2]]
    tool = make_tool(make_config(tmp_path), webflow=webflow_session(items=items), sanity=sanity)

    report = tool.run()

    assert [r.status for r in report.results] == ["failed", "ok"]
    assert report.results[0].code == "MAPPING"
    assert written_ids(sanity) == ["imported-i3"]


def test_log_messages_are_written_to_log_file(tmp_path):
    tool = make_tool(make_config(tmp_path))
    tool.log_message("hello", level="WARNING")
    with open(tmp_path / "migration.log", encoding="utf-8") as f:
        assert "WARNING: hello" in f.read()


def test_load_config_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("WEBFLOW_API_KEY", "env-wf")
    monkeypatch.setenv("SANITY_PROJECT_ID", "env-proj")
    monkeypatch.setenv("SANITY_DATASET", "env-ds")
    monkeypatch.setenv("SANITY_TOKEN", "env-tok")

    config = load_config({"sanity": {"dataset": "explicit"}})

    assert config["webflow"]["api_key"] == "env-wf"
    assert config["sanity"]["project_id"] == "env-proj"
    assert config["sanity"]["dataset"] == "explicit"
    assert config["sanity"]["token"] == "env-tok"
    assert config["webflow"]["page_size"] == 100
    assert config["migration"]["id_prefix"] == "imported-"
    assert config["migration"]["dry_run"] is False


def test_load_config_leaves_the_callers_dict_untouched():
    original = {"sanity": {"dataset": "explicit"}}

    config = load_config(original)

    assert original == {"sanity": {"dataset": "explicit"}}
    assert config["sanity"]["dataset"] == "explicit"
    assert "migration" in config
