from __future__ import annotations
from bs4 import BeautifulSoup, Tag
import pytest
import requests
import responses
from responses import matchers
from ghmkrepo.browser import HTMLSession, find_button, form_values
from ghmkrepo.errors import FormNotFound, LinkNotFound
from test_helpers import CREATION_FORM, DASHBOARD, LOGIN_PAGE, REPO_PAGE

FORM = """\
<form>
<input type="text" name="plain" value="x">
<input name="untyped">
<input type="hidden" name="token" value="t0k3n">
<input type="checkbox" name="unchecked" value="1">
<input type="checkbox" name="checked" checked>
<input type="radio" name="choice" value="a">
<input type="radio" name="choice" value="b" checked>
<input type="text" name="off" value="nope" disabled>
<input type="text" value="nameless">
<input type="submit" name="go" value="Go">
<input type="image" name="pic" alt="Picture">
<input type="reset" name="reset">
<textarea name="notes">Some notes</textarea>
<select name="sel"><option value="1">One</option>
<option value="2" selected>Two</option></select>
<select name="first"><option>Alpha</option><option>Beta</option></select>
<button name="btn" value="clicked">Press  Me</button>
<button type="button" name="nobtn">Not Me</button>
</form>
"""


def get_form(html: str = FORM) -> Tag:
    form = BeautifulSoup(html, "html.parser").form
    assert form is not None
    return form


def test_form_values() -> None:
    assert form_values(get_form()) == {
        "plain": "x",
        "untyped": "",
        "token": "t0k3n",
        "checked": "on",
        "choice": "b",
        "notes": "Some notes",
        "sel": "2",
        "first": "Alpha",
    }


@pytest.mark.parametrize(
    "label,name",
    [
        ("Go", "go"),
        ("go", "go"),
        ("Picture", "pic"),
        ("Press Me", "btn"),
        ("clicked", "btn"),
    ],
)
def test_find_button(label: str, name: str) -> None:
    btn = find_button(get_form(), label)
    assert btn is not None
    assert btn["name"] == name


@pytest.mark.parametrize("label", ["Not Me", "nobtn", "reset", "Stop", "plain"])
def test_find_button_missing(label: str) -> None:
    assert find_button(get_form(), label) is None


def test_login_flow() -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            "https://example.com/login",
            body=LOGIN_PAGE,
        )
        rsps.add(
            responses.POST,
            "https://example.com/session",
            body=DASHBOARD,
            headers={"Set-Cookie": "user_session=x; Path=/"},
            match=[
                matchers.urlencoded_params_matcher(
                    {
                        "authenticity_token": "abc123",
                        "login": "jdoe",
                        "password": "hunter2",
                        "commit": "Log in",
                    }
                )
            ],
        )
        rsps.add(
            responses.GET,
            "https://example.com/repositories/new",
            body=CREATION_FORM,
            match=[matchers.header_matcher({"Cookie": "user_session=x"})],
        )
        rsps.add(
            responses.POST,
            "https://example.com/repositories",
            body=REPO_PAGE,
            match=[
                matchers.urlencoded_params_matcher(
                    {
                        "authenticity_token": "def456",
                        "repository[name]": "Foo-Bar",
                        "repository[description]": "Perl: does a thing",
                        "repository[homepage]": "http://search.cpan.org/dist/Foo-Bar",
                        "repository[public]": "true",
                    }
                ),
                matchers.header_matcher({"Cookie": "user_session=x"}),
            ],
        )
        with HTMLSession() as browser:
            assert browser.navigate("https://example.com/login") == LOGIN_PAGE
            assert browser.url == "https://example.com/login"
            page = browser.submit_form(
                1, {"login": "jdoe", "password": "hunter2"}, button="Log in"
            )
            assert page == DASHBOARD
            assert browser.content == DASHBOARD
            page = browser.follow_link("create a new one")
            assert page == CREATION_FORM
            assert browser.url == "https://example.com/repositories/new"
            page = browser.submit_form(
                2,
                {
                    "repository[name]": "Foo-Bar",
                    "repository[description]": "Perl: does a thing",
                    "repository[homepage]": "http://search.cpan.org/dist/Foo-Bar",
                    "repository[public]": "true",
                },
                button="Create repository",
            )
            assert page == REPO_PAGE
        ua = rsps.calls[0].request.headers["User-Agent"]
        assert ua.startswith("ghmkrepo/")
        assert "http" not in ua


def test_submit_get_form() -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "https://example.com/new", body=CREATION_FORM)
        rsps.add(
            responses.GET,
            "https://example.com/search",
            body="results",
            match=[matchers.query_param_matcher({"q": "foo"})],
        )
        with HTMLSession() as browser:
            browser.navigate("https://example.com/new")
            assert browser.submit_form(1, {"q": "foo"}) == "results"


@pytest.mark.parametrize("number", [0, 3, -1])
def test_submit_no_such_form(number: int) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "https://example.com/new", body=CREATION_FORM)
        with HTMLSession() as browser:
            browser.navigate("https://example.com/new")
            with pytest.raises(FormNotFound):
                browser.submit_form(number, {})
        assert len(rsps.calls) == 1


def test_submit_no_such_button() -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "https://example.com/login", body=LOGIN_PAGE)
        with HTMLSession() as browser:
            browser.navigate("https://example.com/login")
            with pytest.raises(FormNotFound) as excinfo:
                browser.submit_form(1, {}, button="Sign in")
            assert str(excinfo.value) == "Form #1 has no 'Sign in' button"


def test_follow_missing_link() -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "https://example.com/login", body=LOGIN_PAGE)
        with HTMLSession() as browser:
            browser.navigate("https://example.com/login")
            with pytest.raises(LinkNotFound) as excinfo:
                browser.follow_link("create a new one")
            assert str(excinfo.value) == (
                "No link with text 'create a new one' on https://example.com/login"
            )


def test_navigate_http_error() -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "https://example.com/login", status=503)
        with HTMLSession() as browser:
            with pytest.raises(requests.HTTPError):
                browser.navigate("https://example.com/login")
            assert browser.url is None
            assert browser.content == ""
