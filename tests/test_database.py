"""
Tests for engine construction and slow query logging
"""

import logging

from sqlalchemy import create_engine, text

from booster_api.database import engine_options, watch_slow_queries


class TestEngineOptions:
    def test_sqlite_has_no_pool_tuning(self):
        options = engine_options("sqlite:///./local.db")
        assert options == {"connect_args": {"check_same_thread": False}}

    def test_postgres_gets_pool(self):
        options = engine_options("postgresql://user:pw@db/booster")
        assert options["pool_pre_ping"] is True
        assert "pool_size" in options
        assert "connect_args" not in options


class TestSlowQueryLogging:
    def test_warns_above_threshold(self, caplog):
        """Test a negative threshold flags every statement"""
        engine = create_engine("sqlite://")
        watch_slow_queries(engine, threshold=-1)

        with caplog.at_level(logging.WARNING, logger="booster_api.database"):
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))

        assert "Slow query" in caplog.text

    def test_quiet_below_threshold(self, caplog):
        engine = create_engine("sqlite://")
        watch_slow_queries(engine, threshold=60)

        with caplog.at_level(logging.WARNING, logger="booster_api.database"):
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))

        assert "Slow query" not in caplog.text
