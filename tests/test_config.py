from student_records.config import Settings
from student_records.services.query import QueryDefaults


def test_cors_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://admin.school.edu")
    settings = Settings(_env_file=None)
    assert settings.CORS_ORIGINS == ["http://localhost:3000", "http://admin.school.edu"]


def test_cors_origins_single_value(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000")
    assert Settings(_env_file=None).CORS_ORIGINS == ["http://localhost:3000"]


def test_cors_origins_default(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    assert Settings(_env_file=None).CORS_ORIGINS == ["*"]


def test_query_defaults_from_env(monkeypatch):
    monkeypatch.setenv("DEFAULT_SORT_FIELD", "percentage")
    monkeypatch.setenv("DEFAULT_SORT_ORDER", "desc")
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "25")

    defaults = QueryDefaults.from_settings(Settings(_env_file=None))

    assert defaults == QueryDefaults(sort_by="percentage", sort_order="desc", page_size=25)
