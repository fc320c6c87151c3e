"""
bundlerepo Test Suite
=====================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/        → bundlerepo.core (config, models, reporter, exceptions)
    ├── test_storage/     → bundlerepo.storage (identity resolution, artifact store)
    ├── test_index/       → bundlerepo.index (registry, dispatch, R5 format)
    ├── test_repository/  → bundlerepo.repository (local + read-only repositories)
    └── conftest.py       → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_repository/   # Run only repository tests
"""
