"""
CLI, settings, logging and highlighting tests

Tests the developer CLI pipeline end to end along with the ambient pieces
it relies on.
"""

from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest
import yaml
from loguru import logger
from pydantic import ValidationError
from pygments.token import Comment, Keyword, Name, Other

from whisker.__main__ import main, tree_format
from whisker.config import AppSettings
from whisker.lib.lexer import MustacheLexer, get_lexer
from whisker.lib.log import LOG, state_connectToLogger
from whisker.lib.parser import Parser, parse


class TestCommandLine:
    """Test the whisker CLI pipeline"""

    def test_tree_output(self, tmp_path, capsys):
        """Default output is an indented tree"""
        template = tmp_path / "page.mustache"
        template.write_text("Hi {{#people}}{{name}}{{/people}}")

        main([str(template)])

        out = capsys.readouterr().out
        assert "text 'Hi ' [0:3]" in out
        assert "# 'people'" in out
        assert "  name 'name'" in out

    def test_yaml_output(self, tmp_path, capsys):
        """YAML output loads back as a list of token dicts"""
        template = tmp_path / "page.mustache"
        template.write_text("{{#a}}x{{/a}}")

        main([str(template), "--format", "yaml"])

        data = yaml.safe_load(capsys.readouterr().out)
        assert data[0]["type"] == "#"
        assert data[0]["kind"] == "section"
        assert data[0]["section_end"] == 7
        assert data[0]["children"][0]["value"] == "x"

    def test_custom_tags(self, tmp_path, capsys):
        """--openTag/--closeTag set the starting delimiters"""
        template = tmp_path / "page.mustache"
        template.write_text("<%name%>")

        main([str(template), "--openTag", "<%", "--closeTag", "%>"])

        assert "name 'name'" in capsys.readouterr().out

    def test_highlight(self, tmp_path, capsys):
        """--highlight echoes the source before the tree"""
        template = tmp_path / "page.mustache"
        template.write_text("{{#items}}{{/items}}")

        main([str(template), "--highlight"])

        assert "items" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """A missing template exits with status 1"""
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "absent.mustache")])

        assert excinfo.value.code == 1
        assert "Template file not found" in capsys.readouterr().err

    def test_half_tag_pair(self, tmp_path):
        """Only one custom delimiter is an error"""
        template = tmp_path / "page.mustache"
        template.write_text("x")

        with pytest.raises(SystemExit) as excinfo:
            main([str(template), "--openTag", "<%"])
        assert excinfo.value.code == 1

    def test_whitespace_in_tag(self, tmp_path, capsys):
        """A delimiter containing whitespace is reported, not parsed"""
        template = tmp_path / "page.mustache"
        template.write_text("x")

        with pytest.raises(SystemExit) as excinfo:
            main([str(template), "--openTag", "< %", "--closeTag", "%>"])

        assert excinfo.value.code == 1
        assert "free of whitespace" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        """Template errors are reported and exit with status 1"""
        template = tmp_path / "page.mustache"
        template.write_text("{{#a}}")

        with pytest.raises(SystemExit) as excinfo:
            main([str(template)])

        assert excinfo.value.code == 1
        assert "Unclosed section 'a'" in capsys.readouterr().err

    def test_tree_format_depth(self):
        """Nested children are indented two spaces per level"""
        lines = tree_format(parse("{{#a}}{{#b}}x{{/b}}{{/a}}"))
        assert lines[2].startswith("    text 'x'")


class TestSettings:
    """Test environment-driven configuration"""

    def test_defaults(self):
        """Unset environment gives the built-in defaults"""
        settings = AppSettings()

        assert settings.regex_cache_size == 4
        assert settings.tagPair_get() == ("{{", "}}")
        assert settings.debug_mode is False

    def test_env_override(self, monkeypatch):
        """WHISKER_ variables override the defaults"""
        monkeypatch.setenv("WHISKER_REGEX_CACHE_SIZE", "8")
        monkeypatch.setenv("WHISKER_OPEN_TAG", "<%")

        settings = AppSettings()
        assert settings.regex_cache_size == 8
        assert settings.open_tag == "<%"

    def test_invalid_cache_size(self, monkeypatch):
        """A cache size below one fails validation"""
        monkeypatch.setenv("WHISKER_REGEX_CACHE_SIZE", "0")
        with pytest.raises(ValidationError):
            AppSettings()


class TestLogging:
    """Test verbosity-gated logging"""

    def test_silent_without_state(self):
        """Nothing is logged before a state is connected"""
        messages = []
        handler_id = logger.add(messages.append, format="{message}")
        try:
            state_connectToLogger(None)
            LOG("hidden", level=1)
        finally:
            logger.remove(handler_id)

        assert messages == []

    def test_parser_logs_delimiter_switch(self):
        """Parser activity is logged at high verbosity"""
        messages = []
        handler_id = logger.add(messages.append, format="{message}")
        try:
            state_connectToLogger(SimpleNamespace(verbosity=3))
            parse("{{=<% %>=}}<%x%>")
        finally:
            state_connectToLogger(None)
            logger.remove(handler_id)

        assert any("Delimiters switched to '<% %>'" in message for message in messages)

    def test_level_gate(self):
        """Messages above the verbosity level are dropped"""
        messages = []
        handler_id = logger.add(messages.append, format="{message}")
        try:
            state_connectToLogger(SimpleNamespace(verbosity=1))
            LOG("shown", level=1)
            LOG("too detailed", level=2)
        finally:
            state_connectToLogger(None)
            logger.remove(handler_id)

        assert [message.strip() for message in messages] == ["shown"]


class TestLexer:
    """Test the Pygments lexer"""

    def tokens_get(self, text):
        return list(get_lexer().get_tokens(text))

    def test_section_tokens(self):
        """Section sigils and names get distinct token types"""
        tokens = self.tokens_get("{{#items}}{{name}}{{/items}}")

        assert (Keyword, "#") in tokens
        assert (Name.Function, "items") in tokens
        assert (Name.Variable, "name") in tokens
        assert (Comment.Preproc, "{{") in tokens

    def test_comment(self):
        """A comment tag is one Comment token"""
        tokens = self.tokens_get("{{! note }}")
        assert (Comment, "{{! note }}") in tokens

    def test_plain_text(self):
        """Text outside tags is passed through as Other"""
        tokens = self.tokens_get("Hello {{name}}")
        assert (Other, "Hello ") in tokens

    def test_lexer_metadata(self):
        """The lexer registers the mustache alias and extension"""
        assert "mustache" in MustacheLexer.aliases
        assert "*.mustache" in MustacheLexer.filenames


class TestThreadedParsing:
    """One Parser shared by many threads"""

    def test_parallel_parses(self):
        """Concurrent parses with different delimiters stay independent"""
        parser = Parser()
        templates = [f"{{{{=<{i} {i}>=}}}}<{i}#s{i}>v<{i}/s{i}>" for i in range(40)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(parser.parse, templates))

        for i, tokens in enumerate(results):
            assert tokens[1].value == "s"
            assert tokens[1].children[0].value == "v"
