"""
Unit tests for translating change files into statements
"""

import pytest
from psycopg2 import sql

from schemasupport.errors import TranslationError
from schemasupport.models import ChangeFile
from schemasupport.translate import translate, translate_csv, translate_sql
from schemasupport.translate.seed import build_insert, table_from_path
from tests.helpers import as_text, write_change


class TestTranslateSql:
    """Test SQL scripts"""

    def test_script_is_trimmed(self, change_root):
        path = write_change(change_root, "a.sql", "\n\t  create table a (id int);\r\n\v ")

        statements = translate_sql(str(path))

        assert len(statements) == 1
        assert statements[0].sql == "create table a (id int);"
        assert statements[0].params is None

    def test_multi_statement_script_kept_whole(self, change_root):
        body = "create table a (id int);\ncreate table b (id int);"
        path = write_change(change_root, "a.sql", body)

        assert translate_sql(str(path))[0].sql == body

    def test_percent_sign_untouched(self, change_root):
        path = write_change(change_root, "a.sql", "select 'x' like '%y%';")

        assert translate_sql(str(path))[0].sql == "select 'x' like '%y%';"

    def test_blank_script_yields_nothing(self, change_root):
        path = write_change(change_root, "a.sql", " \n\n\t")

        assert translate_sql(str(path)) == []


class TestTableFromPath:
    """Test target table inference"""

    def test_parent_directory_is_table(self):
        assert table_from_path("sql/seed/users/0000000001_users.csv") == "users"

    def test_schema_qualified_directory(self):
        assert table_from_path("sql/public.users/0000000001.csv") == "public.users"

    def test_no_directory_raises(self):
        with pytest.raises(TranslationError, match="Unable to figure out table name"):
            table_from_path("users.csv")

    def test_invalid_table_name_raises(self):
        with pytest.raises(TranslationError, match="Invalid table name"):
            table_from_path("sql/users;drop table x/0000000001.csv")


class TestTranslateCsv:
    """Test CSV seed files"""

    def test_one_insert_per_row_with_nulls(self, change_root):
        path = write_change(change_root, "people/0000000001_seed.csv", "id,name\n1,Alice\n2,\n")

        statements = translate_csv(path.as_posix())

        assert len(statements) == 2
        assert as_text(statements[0].sql) == 'insert into "people" ("id", "name") values (%s, %s);'
        assert statements[0].params == ("1", "Alice")
        assert statements[1].sql == statements[0].sql
        assert statements[1].params == ("2", None)

    def test_quoted_fields(self, change_root):
        path = write_change(
            change_root, "notes/n.csv", 'id,body\n1,"hello, world"\n2,"say ""hi"""\n'
        )

        statements = translate_csv(path.as_posix())

        assert statements[0].params == ("1", "hello, world")
        assert statements[1].params == ("2", 'say "hi"')

    def test_header_only_yields_nothing(self, change_root):
        path = write_change(change_root, "people/p.csv", "id,name\n")

        assert translate_csv(path.as_posix()) == []

    def test_blank_lines_skipped(self, change_root):
        path = write_change(change_root, "people/p.csv", "id,name\n1,a\n\n2,b\n")

        assert [s.params for s in translate_csv(path.as_posix())] == [("1", "a"), ("2", "b")]

    def test_header_whitespace_stripped(self, change_root):
        path = write_change(change_root, "people/p.csv", "id, name\n1,a\n")

        assert as_text(translate_csv(path.as_posix())[0].sql) == (
            'insert into "people" ("id", "name") values (%s, %s);'
        )

    def test_empty_file_raises(self, change_root):
        path = write_change(change_root, "people/p.csv", "")

        with pytest.raises(TranslationError, match="No columns found"):
            translate_csv(path.as_posix())

    def test_empty_header_raises(self, change_root):
        path = write_change(change_root, "people/p.csv", "\n1,a\n")

        with pytest.raises(TranslationError, match="No columns found"):
            translate_csv(path.as_posix())

    def test_invalid_column_raises(self, change_root):
        path = write_change(change_root, "people/p.csv", 'id,"name) values (1); drop table x; --"\n')

        with pytest.raises(TranslationError, match="Invalid column name"):
            translate_csv(path.as_posix())

    def test_ragged_row_raises(self, change_root):
        path = write_change(change_root, "people/p.csv", "id,name\n1,a,extra\n")

        with pytest.raises(TranslationError, match="Line 2 has 3 fields, expected 2"):
            translate_csv(path.as_posix())

    def test_build_insert(self):
        assert as_text(build_insert("t", ["a", "b", "c"])) == (
            'insert into "t" ("a", "b", "c") values (%s, %s, %s);'
        )

    def test_build_insert_schema_qualified(self):
        assert as_text(build_insert("public.users", ["id"])) == (
            'insert into "public"."users" ("id") values (%s);'
        )

    def test_build_insert_composes_identifiers(self):
        template = build_insert("public.users", ["id", "name"])

        assert isinstance(template, sql.Composed)
        assert sql.Identifier("public", "users") in list(template)


class TestTranslateDispatch:
    """Test extension-based dispatch"""

    def test_csv_dispatch(self, change_root):
        path = write_change(change_root, "people/0000000001.csv", "id\n1\n")

        statements = translate(ChangeFile(path=path.as_posix(), fingerprint="f"))

        assert statements[0].params == ("1",)

    def test_sql_dispatch(self, change_root):
        path = write_change(change_root, "0000000001.sql", "select 1;")

        statements = translate(ChangeFile(path=path.as_posix(), fingerprint="f"))

        assert statements[0].sql == "select 1;"

    def test_unreadable_file_raises_translation_error(self, change_root):
        missing = (change_root / "gone.sql").as_posix()

        with pytest.raises(TranslationError, match="Unable to read"):
            translate(ChangeFile(path=missing, fingerprint="f"))
