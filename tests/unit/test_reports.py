import json

from packager_codes.pipeline.reports import build_run_summary, write_run_summary


def test_build_run_summary_statuses():
    assert build_run_summary("r", {"packager_codes": 2})["status"] == "success"
    assert build_run_summary("r", {"geocode_errors": 1})["status"] == "partial"
    assert build_run_summary("r", {}, error_code="HTTP_ERROR")["status"] == "error"


def test_build_run_summary_fills_missing_counters_with_zero():
    summary = build_run_summary("r", {"categories_fetched": 4})
    assert summary["counters"]["categories_fetched"] == 4
    assert summary["counters"]["geocode_cache_hits"] == 0


def test_write_run_summary(tmp_path):
    path = write_run_summary(tmp_path / "reports" / "summary.json", "run-x", {"packager_codes": 1})
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["run_id"] == "run-x"
    assert payload["counters"]["packager_codes"] == 1
