"""
Form suites package.

Keeps `formsuites` importable for:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - reuse of the field/button engine from other test projects
"""
