#!/usr/bin/env python3
"""Shared pytest fixtures for json-sqlizer test suite."""

import pytest
import sqlite3
import pathlib
import sys
from typing import Any, Dict, List

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    generate_typed_documents,
    write_documents,
)

SCHEMA = [
    "CREATE TABLE users (active BOOLEAN, id INTEGER, name TEXT, score REAL)",
    "CREATE TABLE orders (active BOOLEAN, id INTEGER, name TEXT, score REAL)",
    "CREATE TABLE notes (body TEXT, id INTEGER, tags TEXT)",
]


# ============================================================================
# Core component fixtures
# ============================================================================

@pytest.fixture
def assembler():
    """Create a fresh DocumentAssembler."""
    from sqlizer.assembler import DocumentAssembler
    return DocumentAssembler()


@pytest.fixture
def projector():
    """Create a RecordProjector with the default $type convention."""
    from sqlizer.projector import RecordProjector
    return RecordProjector()


@pytest.fixture
def identity():
    """Sanitizer that leaves values untouched, for asserting on raw rows."""
    return lambda value: value


@pytest.fixture
def streaming_parser():
    """Create a StreamingJSONParser instance."""
    from sqlizer.streaming_parser import StreamingJSONParser
    return StreamingJSONParser()


# ============================================================================
# Database fixtures
# ============================================================================

@pytest.fixture
def sqlite_db(tmp_path) -> pathlib.Path:
    """Create a SQLite database with the tables used by the generated documents."""
    db_path = tmp_path / "load.sqlite3"
    conn = sqlite3.connect(str(db_path))
    for ddl in SCHEMA:
        conn.execute(ddl)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def count_rows():
    """Return a helper counting rows of a table in a SQLite file."""
    def _count(db_path, table: str) -> int:
        conn = sqlite3.connect(str(db_path))
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        finally:
            conn.close()
    return _count


@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure no SQLIZER_* variables leak into a test."""
    for var in ['SQLIZER_DATABASE', 'SQLIZER_MAX_ROWS', 'SQLIZER_BUFFER_SIZE',
                'SQLIZER_TYPE_KEY', 'SQLIZER_RESERVED_PREFIX']:
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def typed_documents() -> List[Dict[str, Any]]:
    """25 users followed by 10 orders followed by 5 users."""
    return generate_typed_documents([("users", 25), ("orders", 10), ("users", 5)])


@pytest.fixture
def documents_file(tmp_path, typed_documents) -> pathlib.Path:
    """Concatenated documents, one per line."""
    return pathlib.Path(write_documents(typed_documents, str(tmp_path / "docs.json")))


@pytest.fixture
def array_documents_file(tmp_path, typed_documents) -> pathlib.Path:
    """The same documents wrapped in one top-level array."""
    return pathlib.Path(write_documents(typed_documents, str(tmp_path / "docs_array.json"), layout="array"))


# ============================================================================
# Performance Testing Fixtures
# ============================================================================

@pytest.fixture
def memory_profiler():
    """Setup memory profiling for tests."""
    try:
        from memory_profiler import memory_usage

        def profile_memory(func, *args, **kwargs):
            """Profile memory usage of a function."""
            mem_usage = memory_usage((func, args, kwargs), interval=0.05)
            return {
                "min": min(mem_usage),
                "max": max(mem_usage),
                "avg": sum(mem_usage) / len(mem_usage)
            }

        return profile_memory
    except ImportError:
        pytest.skip("memory_profiler not installed")


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
