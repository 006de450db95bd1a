"""Unit tests for output and path helpers"""

from deskdialog.common.text import firstInteger_get, home_expand, output_clean


class TestOutputClean:
    """Test trailing newline removal"""

    def test_strips_newlines_only(self):
        """Test only trailing line breaks are removed"""
        assert output_clean("value \r\n\n") == "value "
        assert output_clean("a\nb\n") == "a\nb"


class TestHomeExpand:
    """Test tilde expansion"""

    def test_leading_tilde(self, monkeypatch):
        """Test leading tilde becomes HOME"""
        monkeypatch.setenv("HOME", "/home/ada")
        assert home_expand("~/x") == "/home/ada/x"
        assert home_expand("/tmp/~x") == "/tmp/~x"

    def test_home_unset(self, monkeypatch):
        """Test path unchanged without HOME"""
        monkeypatch.delenv("HOME", raising=False)
        assert home_expand("~/x") == "~/x"


class TestFirstInteger:
    """Test integer extraction"""

    def test_found(self):
        """Test first integer is returned"""
        assert firstInteger_get('"3" "5"') == 3
        assert firstInteger_get("-2\n") == -2

    def test_missing(self):
        """Test None when no digits present"""
        assert firstInteger_get("") is None
