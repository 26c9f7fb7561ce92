import json
from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from app.application.ports.analysis_repo import AnalysisRecord
from app.application.services.history_service import HistoryService, formatted_date
from app.exceptions import ValidationError
from app.utils import iso_utc

NOW = datetime(2026, 10, 18, 15, 45)


class FakeAnalysisRepo:
    def __init__(self):
        self.rows: List[AnalysisRecord] = []
        self._id = 1

    def create(self, user_id, analysis, image_info, saved_at):
        rec = AnalysisRecord(self._id, user_id, json.dumps(analysis), json.dumps(image_info),
                             image_info.get("storedName"), analysis.get("analysisType"), saved_at)
        self.rows.append(rec)
        self._id += 1
        return rec

    def _owned(self, user_id):
        return sorted((r for r in self.rows if r.user_id == user_id), key=lambda r: r.saved_at, reverse=True)

    def list_for_user(self, user_id, offset, limit, search=None, analysis_type=None):
        rows = [r for r in self._owned(user_id) if self._matches(r, search, analysis_type)]
        return rows[offset:offset + limit]

    def count_for_user(self, user_id, search=None, analysis_type=None):
        return len([r for r in self._owned(user_id) if self._matches(r, search, analysis_type)])

    @staticmethod
    def _matches(r, search, analysis_type):
        if search and search not in r.analysis_data and search not in r.image_info:
            return False
        if analysis_type and analysis_type not in (r.analysis_type or ""):
            return False
        return True

    def list_all_for_user(self, user_id):
        return self._owned(user_id)

    def count_since(self, user_id, since):
        return len([r for r in self._owned(user_id) if r.saved_at >= since])

    def get_many(self, user_id, ids):
        return [r for r in self._owned(user_id) if r.id in ids]

    def delete_many(self, user_id, ids):
        doomed = [r for r in self.rows if r.user_id == user_id and r.id in ids]
        self.rows = [r for r in self.rows if r not in doomed]
        return len(doomed)


def analysis(kind="animal", objects=("cat",)):
    return {"objects": list(objects), "text": ["a cat"], "faces": [], "analysisType": kind}


@pytest.fixture
def repo():
    return FakeAnalysisRepo()


@pytest.fixture
def svc(repo):
    return HistoryService(repo, clock=lambda: NOW)


def seed(repo, user_id, count, kind="animal", start=NOW):
    for i in range(count):
        repo.create(user_id, analysis(kind), {"originalName": f"img{i}.jpg", "storedName": f"{i}.jpg"},
                    start - timedelta(hours=i))


def test_second_page_holds_the_remainder(svc, repo):
    seed(repo, 1, 15)
    out = svc.list_history(1, page=2, limit=10)
    assert len(out["history"]) == 5
    assert out["pagination"] == {"page": 2, "limit": 10, "total": 15, "totalPages": 2}


def test_history_newest_first_with_quick_info(svc, repo):
    seed(repo, 1, 3)
    items = svc.list_history(1)["history"]
    assert [i["imageInfo"]["originalName"] for i in items] == ["img0.jpg", "img1.jpg", "img2.jpg"]
    assert items[0]["quickInfo"] == {"analysisType": "animal", "objectCount": 1, "textCount": 1, "faceCount": 0}
    assert items[0]["savedAt"] == "2026-10-18T15:45:00Z"
    assert items[0]["formattedDate"] == "Oct 18, 2026, 03:45 PM"


def test_history_defaults_and_clamps_limit(svc, repo):
    assert svc.list_history(1)["pagination"]["limit"] == 20
    assert svc.list_history(1, page=0, limit=1000)["pagination"] == {"page": 1, "limit": 100, "total": 0, "totalPages": 0}


def test_history_is_private_per_user(svc, repo):
    seed(repo, 1, 2)
    seed(repo, 2, 4)
    assert svc.list_history(1)["pagination"]["total"] == 2


def test_history_filters(svc, repo):
    seed(repo, 1, 2, kind="food")
    seed(repo, 1, 3, kind="animal")
    assert svc.list_history(1, analysis_type="food")["pagination"]["total"] == 2
    assert svc.list_history(1, search="img1.jpg")["pagination"]["total"] == 2


def test_unreadable_rows_are_skipped(svc, repo):
    seed(repo, 1, 2)
    repo.rows[0].analysis_data = "{not json"
    assert len(svc.list_history(1)["history"]) == 1


def test_save_analysis(svc, repo):
    out = svc.save_analysis(1, analysis(), {"originalName": "a.jpg", "storedName": "a.jpg"})
    assert out == {"success": True, "savedId": 1}
    # explicit saves are never deduplicated
    svc.save_analysis(1, analysis(), {"originalName": "a.jpg", "storedName": "a.jpg"})
    assert len(repo.rows) == 2


def test_save_analysis_requires_both_parts(svc):
    with pytest.raises(ValidationError):
        svc.save_analysis(1, analysis(), None)


def test_bulk_delete_only_touches_own_rows(svc, repo):
    seed(repo, 1, 2)
    seed(repo, 2, 1)
    out = svc.bulk_delete(1, [1, 2, 3])
    assert out["deletedCount"] == 2
    assert out["message"] == "Successfully deleted 2 analyses"
    assert [r.user_id for r in repo.rows] == [2]


def test_bulk_delete_requires_ids(svc):
    with pytest.raises(ValidationError) as exc:
        svc.bulk_delete(1, [])
    assert exc.value.status_code == 400
    assert exc.value.detail == "Analysis IDs array required"


def test_export_json(svc, repo):
    seed(repo, 1, 2)
    seed(repo, 2, 1)
    doc = svc.export(1, [1, 2, 3])
    assert doc["exportInfo"]["totalAnalyses"] == 2
    assert doc["exportInfo"]["exportFormat"] == "json"
    assert doc["exportInfo"]["version"] == "1.0"
    assert {a["id"] for a in doc["analyses"]} == {1, 2}


def test_export_unsupported_format(svc, repo):
    with pytest.raises(ValidationError) as exc:
        svc.export(1, [1], "xml")
    assert exc.value.detail == "Unsupported export format"


def test_statistics(svc, repo):
    seed(repo, 1, 3, kind="food")
    seed(repo, 1, 2, kind="animal", start=NOW - timedelta(days=30))
    stats = svc.statistics(1)
    assert stats["totalAnalyses"] == 5
    assert stats["recentActivity"] == 3
    assert stats["analysesByType"] == {"food": 3, "animal": 2}
    assert stats["averagePerWeek"] == 0.4


def test_formatted_date_midnight():
    assert formatted_date(datetime(2026, 1, 5, 0, 7)) == "Jan 5, 2026, 12:07 AM"


def test_saved_at_serialises_aware_and_naive_alike():
    aware = datetime(2026, 10, 18, 17, 45, tzinfo=timezone(timedelta(hours=2)))
    assert iso_utc(aware) == iso_utc(datetime(2026, 10, 18, 15, 45)) == "2026-10-18T15:45:00Z"
