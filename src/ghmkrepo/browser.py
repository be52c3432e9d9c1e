"""
Minimal form-filling web browser

`Browser` describes the interactions the repository-creation workflow needs
from a web client; `HTMLSession` implements them on top of `requests` and
BeautifulSoup.  A session keeps its cookies (and thus any login) for its whole
lifetime and is not safe to use from multiple threads.
"""

from __future__ import annotations
from collections.abc import Mapping
import logging
from typing import Optional, Protocol
from urllib.parse import urljoin
from bs4 import BeautifulSoup, Tag
import requests
from . import __version__
from .errors import FormNotFound, LinkNotFound

log = logging.getLogger(__name__)

USER_AGENT = f"ghmkrepo/{__version__} requests/{requests.__version__}"

SUBMIT_TYPES = {"submit", "image"}


class Browser(Protocol):
    @property
    def content(self) -> str:
        """The body of the current page"""
        ...

    def navigate(self, url: str) -> str: ...

    def submit_form(
        self,
        number: int,
        fields: Mapping[str, str],
        button: Optional[str] = None,
    ) -> str:
        """
        Fill in the given fields of the ``number``-th (counting from 1) form
        on the current page and submit it, optionally by clicking the submit
        button with the given label
        """
        ...

    def follow_link(self, text: str) -> str: ...


class HTMLSession:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self.session = session
        self.timeout = timeout
        self.url: Optional[str] = None
        self._content = ""
        self._soup: Optional[BeautifulSoup] = None

    def __enter__(self) -> HTMLSession:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @property
    def content(self) -> str:
        return self._content

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self._content, "html.parser")
        return self._soup

    def navigate(self, url: str) -> str:
        log.debug("GET %s", url)
        return self._load(self.session.get(url, timeout=self.timeout))

    def submit_form(
        self,
        number: int,
        fields: Mapping[str, str],
        button: Optional[str] = None,
    ) -> str:
        forms = self.soup.find_all("form")
        if not 1 <= number <= len(forms):
            raise FormNotFound(
                f"No form #{number} on {self.url} (page has {len(forms)})"
            )
        form = forms[number - 1]
        data = form_values(form)
        for k, v in fields.items():
            data[k] = v
        if button is not None:
            btn = find_button(form, button)
            if btn is None:
                raise FormNotFound(f"Form #{number} has no {button!r} button")
            if btn.get("name"):
                data[str(btn["name"])] = str(btn.get("value", ""))
        action = urljoin(self.url or "", str(form.get("action") or ""))
        method = str(form.get("method") or "get").upper()
        log.debug("%s %s (form #%d)", method, action, number)
        if method == "POST":
            r = self.session.post(action, data=data, timeout=self.timeout)
        else:
            r = self.session.get(action, params=data, timeout=self.timeout)
        return self._load(r)

    def follow_link(self, text: str) -> str:
        for a in self.soup.find_all("a", href=True):
            if normspace(a.get_text()) == normspace(text):
                return self.navigate(urljoin(self.url or "", str(a["href"])))
        raise LinkNotFound(f"No link with text {text!r} on {self.url}")

    def _load(self, r: requests.Response) -> str:
        r.raise_for_status()
        self.url = r.url
        self._content = r.text
        self._soup = None
        return self._content


def form_values(form: Tag) -> dict[str, str]:
    """
    Return the names & values of the controls in ``form`` that are submitted
    by default, excluding submit buttons
    """
    data: dict[str, str] = {}
    for ctrl in form.find_all(["input", "textarea", "select"]):
        name = ctrl.get("name")
        if not name or ctrl.has_attr("disabled"):
            continue
        name = str(name)
        if ctrl.name == "input":
            itype = str(ctrl.get("type", "text")).lower()
            if itype in SUBMIT_TYPES or itype in ("button", "reset", "file"):
                continue
            if itype in ("checkbox", "radio"):
                if ctrl.has_attr("checked"):
                    data[name] = str(ctrl.get("value", "on"))
                continue
            data[name] = str(ctrl.get("value", ""))
        elif ctrl.name == "textarea":
            data[name] = ctrl.get_text()
        else:
            options = ctrl.find_all("option")
            selected = [o for o in options if o.has_attr("selected")] or options[:1]
            if selected:
                opt = selected[0]
                data[name] = str(opt.get("value", opt.get_text()))
    return data


def find_button(form: Tag, label: str) -> Optional[Tag]:
    """
    Find the submit button in ``form`` labelled ``label`` (by its
    value, its text or its name)
    """
    for ctrl in form.find_all(["input", "button"]):
        if ctrl.name == "input":
            if str(ctrl.get("type", "text")).lower() not in SUBMIT_TYPES:
                continue
            labels = [ctrl.get("value"), ctrl.get("alt")]
        else:
            if str(ctrl.get("type", "submit")).lower() != "submit":
                continue
            labels = [ctrl.get_text(), ctrl.get("value")]
        labels.append(ctrl.get("name"))
        want = normspace(label)
        if any(lb is not None and normspace(str(lb)) == want for lb in labels):
            return ctrl
    return None


def normspace(s: str) -> str:
    return " ".join(s.split())
