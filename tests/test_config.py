"""
Settings tests
"""

from dialectic.config import AppSettings
from dialectic.lib.dialect import Dialect
from dialectic.lib.rules import register_standard_rules


class TestSettings:
    """Test environment driven configuration"""

    def test_defaults(self):
        """Default placeholders and flags"""
        settings = AppSettings()
        assert settings.hoistKey_make("abc") == "⟦HOIST:abc⟧"
        assert settings.traditional_markdown_linebreaks is False

    def test_environment_override(self, monkeypatch):
        """DIALECTIC_ variables override defaults"""
        monkeypatch.setenv("DIALECTIC_HOIST_PREFIX", "@@")
        monkeypatch.setenv("DIALECTIC_MENTION_HREF", "/users/{username}")
        settings = AppSettings()
        assert settings.hoistKey_make("abc") == "@@abc⟧"
        assert settings.mention_href == "/users/{username}"

    def test_dialect_uses_settings(self):
        """Rules read their templates from the engine's settings"""
        dialect = register_standard_rules(Dialect(AppSettings(mention_href="/people/{username}")))
        assert 'href="/people/sam"' in dialect.cook("@sam")
