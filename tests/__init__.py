"""
Rankboard Test Suite
====================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no external dependencies)
- tests/integration/   : Integration tests with testcontainers (real Redis)

Testing Philosophy
------------------
- Unit tests: fast, isolated, test leaderboard semantics
- Integration tests: slower, test real sorted-set behavior
- Use pytest markers (unit / integration) to select tests
- Follow AAA pattern: Arrange, Act, Assert
"""
