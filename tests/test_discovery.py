"""Tests for the homepage → login page → policy page discovery crawl."""

from __future__ import annotations

import httpx
import respx

from policywatch.scraper.discovery import END_MARKER, START_MARKER, discover

_HOME = """\
<html><body>
  <a href="/about">About us</a>
  <a href="/account/Login">Log in</a>
  <a href="https://shop.example/signin">Sign in</a>
  <a href="https://elsewhere.example/login">Partner login</a>
</body></html>
"""

_LOGIN = """\
<html><body>
  <form><input name="user"></form>
  <a href="/legal/terms">Terms of Service</a>
  <a href="https://policies.example/privacy">Privacy</a>
  <a href="/help">Help</a>
</body></html>
"""

_SIGNIN = '<html><body><a href="/legal/terms">Terms</a></body></html>'

_TERMS = "<html><body><h1>Terms</h1><p>By using the shop you agree.</p></body></html>"
_PRIVACY = "<html><body><p>We store your email address.</p></body></html>"


class _Echo:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)


class TestDiscover:
    def test_follows_login_then_policy_links(self) -> None:
        echo = _Echo()
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get("https://shop.example/").mock(return_value=httpx.Response(200, text=_HOME))
            respx_mock.get("https://shop.example/account/Login").mock(
                return_value=httpx.Response(200, text=_LOGIN)
            )
            respx_mock.get("https://shop.example/signin").mock(
                return_value=httpx.Response(200, text=_SIGNIN)
            )
            respx_mock.get("https://elsewhere.example/login").mock(
                return_value=httpx.Response(200, text="<html><body></body></html>")
            )
            respx_mock.get("https://shop.example/legal/terms").mock(
                return_value=httpx.Response(200, text=_TERMS)
            )
            respx_mock.get("https://policies.example/privacy").mock(
                return_value=httpx.Response(200, text=_PRIVACY)
            )
            about = respx_mock.get("https://shop.example/about").mock(return_value=httpx.Response(200))
            help_page = respx_mock.get("https://shop.example/help").mock(return_value=httpx.Response(200))

            found = discover("https://shop.example/", echo=echo)

        assert not about.called
        assert not help_page.called
        assert [(f.login_url, f.policy_url) for f in found] == [
            ("https://shop.example/account/Login", "https://shop.example/legal/terms"),
            ("https://shop.example/account/Login", "https://policies.example/privacy"),
            ("https://shop.example/signin", "https://shop.example/legal/terms"),
        ]
        assert "By using the shop you agree." in found[0].text
        assert echo.lines.count(START_MARKER) == 3
        assert echo.lines.count(END_MARKER) == 3

    def test_policy_text_is_unfiltered(self) -> None:
        echo = _Echo()
        home = '<html><body><a href="/login">Login</a></body></html>'
        login = '<html><body><a href="/privacy">Privacy</a></body></html>'
        body = "<html><body><nav>Follow us on Facebook</nav><p>Short.</p></body></html>"
        with respx.mock:
            respx.get("https://a.example/").mock(return_value=httpx.Response(200, text=home))
            respx.get("https://a.example/login").mock(return_value=httpx.Response(200, text=login))
            respx.get("https://a.example/privacy").mock(return_value=httpx.Response(200, text=body))

            (policy,) = discover("https://a.example/", echo=echo)

        assert "Facebook" in policy.text
        assert "Short." in policy.text

    def test_homepage_failure(self) -> None:
        echo = _Echo()
        with respx.mock:
            respx.get("https://down.example/").mock(side_effect=httpx.ConnectError("refused"))
            found = discover("https://down.example/", echo=echo)

        assert found == []
        assert any("Failed to visit homepage" in line for line in echo.lines)

    def test_invalid_homepage_url(self) -> None:
        echo = _Echo()
        assert discover("not-a-url", echo=echo) == []

    def test_failed_policy_page_skipped(self) -> None:
        echo = _Echo()
        home = '<html><body><a href="/signin">Sign in</a></body></html>'
        login = (
            '<html><body><a href="/terms">Terms</a>'
            '<a href="/privacy">Privacy</a></body></html>'
        )
        with respx.mock:
            respx.get("https://a.example/").mock(return_value=httpx.Response(200, text=home))
            respx.get("https://a.example/signin").mock(return_value=httpx.Response(200, text=login))
            respx.get("https://a.example/terms").mock(return_value=httpx.Response(500))
            respx.get("https://a.example/privacy").mock(
                return_value=httpx.Response(200, text=_PRIVACY)
            )

            found = discover("https://a.example/", echo=echo)

        assert [f.policy_url for f in found] == ["https://a.example/privacy"]
        assert any("Failed to visit policy page" in line for line in echo.lines)

    def test_markers_in_host_are_not_matches(self) -> None:
        echo = _Echo()
        home = '<html><body><a href="/about">About</a><a href="/careers">Careers</a></body></html>'
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get("https://signin-portal.example/").mock(
                return_value=httpx.Response(200, text=home)
            )
            about = respx_mock.get("https://signin-portal.example/about").mock(return_value=httpx.Response(200))
            careers = respx_mock.get("https://signin-portal.example/careers").mock(
                return_value=httpx.Response(200)
            )

            found = discover("https://signin-portal.example/", echo=echo)

        assert found == []
        assert not about.called
        assert not careers.called
        assert not any("Found login/signin page" in line for line in echo.lines)

    def test_policy_markers_checked_on_href_only(self) -> None:
        echo = _Echo()
        home = '<html><body><a href="/login">Login</a></body></html>'
        login = '<html><body><a href="/help">Help</a><a href="/terms">Terms</a></body></html>'
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get("https://privacy-hub.example/").mock(return_value=httpx.Response(200, text=home))
            respx_mock.get("https://privacy-hub.example/login").mock(
                return_value=httpx.Response(200, text=login)
            )
            help_page = respx_mock.get("https://privacy-hub.example/help").mock(return_value=httpx.Response(200))
            respx_mock.get("https://privacy-hub.example/terms").mock(
                return_value=httpx.Response(200, text=_TERMS)
            )

            found = discover("https://privacy-hub.example/", echo=echo)

        assert not help_page.called
        assert [f.policy_url for f in found] == ["https://privacy-hub.example/terms"]
