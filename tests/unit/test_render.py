"""
Unit tests for the verbose-mode statement renderer
"""

from schemasupport.render import quote_literal, render_statement


class TestQuoteLiteral:
    """Test display quoting of literal values"""

    def test_plain_text_single_quoted(self):
        assert quote_literal("Alice Smith") == "'Alice Smith'"

    def test_allowed_punctuation_passes_through(self):
        assert quote_literal("sql/0000000001_init.sql") == "'sql/0000000001_init.sql'"

    def test_quote_is_escaped(self):
        assert quote_literal("O'Brien") == "E'O\\x27Brien'"

    def test_ascii_punctuation_is_hex_escaped(self):
        assert quote_literal("a,b") == "E'a\\x2Cb'"

    def test_bmp_character_is_unicode_escaped(self):
        assert quote_literal("café") == "E'caf\\u00E9'"

    def test_astral_character_is_long_escaped(self):
        assert quote_literal("\U0001F600") == "E'\\U0001F600'"

    def test_none_is_null(self):
        assert quote_literal(None) == "NULL"

    def test_empty_string(self):
        assert quote_literal("") == "''"


class TestRenderStatement:
    """Test placeholder substitution"""

    def test_substitutes_in_order(self):
        sql = "insert into people (id, name) values (%s, %s);"

        assert render_statement(sql, ("1", "Alice")) == "insert into people (id, name) values ('1', 'Alice');"

    def test_null_parameter(self):
        sql = "insert into people (id, name) values (%s, %s);"

        assert render_statement(sql, ("2", None)) == "insert into people (id, name) values ('2', NULL);"

    def test_extra_placeholders_left_alone(self):
        assert render_statement("select %s, %s, %s;", ("a",)) == "select 'a', %s, %s;"

    def test_no_params_returns_sql_unchanged(self):
        sql = "select '%s';"

        assert render_statement(sql, None) == sql
        assert render_statement(sql, ()) == sql
