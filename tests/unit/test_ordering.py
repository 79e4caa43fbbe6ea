"""
Unit tests for deterministic change file ordering
"""

import pytest

from schemasupport.models import ChangeFile
from schemasupport.reconcile import ordering_key, sequence_id, sort_change_files


def cf(path: str) -> ChangeFile:
    return ChangeFile(path=path, fingerprint=f"fp-{path}")


class TestSequenceId:
    """Test extraction of the embedded 10-digit id"""

    @pytest.mark.parametrize("path,expected", [
        ("sql/0000000001_a.sql", 1),
        ("sql/2024010112_add_index.sql", 2024010112),
        ("sql/v_0000000042.sql", 42),
        ("sql/0000000007/users.csv", 7),
    ])
    def test_extracts_bounded_id(self, path, expected):
        assert sequence_id(path) == expected

    @pytest.mark.parametrize("path", [
        "sql/init.sql",
        "sql/000000001_nine_digits.sql",
        "sql/00000000001_eleven_digits.sql",
        "0000000001_at_start_of_string.sql",
    ])
    def test_no_id(self, path):
        assert sequence_id(path) is None

    def test_first_id_wins(self):
        assert sequence_id("sql/0000000005/0000000001_x.sql") == 5


class TestOrderingKey:
    """Test the (has_id, id, path) key"""

    def test_key_without_id(self):
        assert ordering_key(cf("sql/init.sql")) == (False, 0, "sql/init.sql")

    def test_key_with_id(self):
        assert ordering_key(cf("sql/0000000003_x.sql")) == (True, 3, "sql/0000000003_x.sql")


class TestSortChangeFiles:
    """Test the resulting order"""

    def test_numbered_files_sort_numerically(self):
        files = [cf("sql/0000000002_b.sql"), cf("sql/0000000001_a.sql")]

        result = sort_change_files(files)

        assert [f.path for f in result] == ["sql/0000000001_a.sql", "sql/0000000002_b.sql"]

    def test_unnumbered_files_come_first(self):
        files = [
            cf("sql/0000000002_b.sql"),
            cf("sql/zzz_extensions.sql"),
            cf("sql/0000000001_a.sql"),
            cf("sql/aaa_roles.sql"),
        ]

        result = sort_change_files(files)

        assert [f.path for f in result] == [
            "sql/aaa_roles.sql",
            "sql/zzz_extensions.sql",
            "sql/0000000001_a.sql",
            "sql/0000000002_b.sql",
        ]

    def test_numeric_not_lexical_across_directories(self):
        files = [cf("sql/a/0000000010_x.sql"), cf("sql/b/0000000009_y.sql")]

        result = sort_change_files(files)

        assert [f.path for f in result] == ["sql/b/0000000009_y.sql", "sql/a/0000000010_x.sql"]

    def test_equal_ids_fall_back_to_path(self):
        files = [cf("sql/0000000001_b.sql"), cf("sql/0000000001_a.sql")]

        result = sort_change_files(files)

        assert [f.path for f in result] == ["sql/0000000001_a.sql", "sql/0000000001_b.sql"]
