"""Short funny texts fetched from a handful of web APIs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable

import lxml.html
import requests

SHADIAO_URL = "https://api.shadiao.pro"
CHP_URL = SHADIAO_URL + "/chp"
DU_URL = SHADIAO_URL + "/du"
PYQ_URL = SHADIAO_URL + "/pyq"
YDUANZI_URL = "http://www.yduanzi.com/duanzi/getduanzi"
CHAYI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/0"
GANHAI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/1"
ERGOFABULOUS_URL = "https://ergofabulous.org/luther/?"
UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
SD_REFERER = SHADIAO_URL
YDUANZI_REFERER = "http://www.yduanzi.com/?utm_source=shadiao.app"
LOVELIVE_REFERER = "https://lovelive.tools/"

_ERGOFABULOUS_XPATH = '//main[@role="main"]/p[@class="larger"]/text()'
_TIMEOUT = 30


def _json_get(data: str | bytes, path: str) -> str:
    """Return the value at a dotted path as text, or "" when it is absent."""
    try:
        value = json.loads(data)
    except (ValueError, TypeError):
        return ""
    for key in path.split("."):
        if not isinstance(value, dict) or key not in value:
            return ""
        value = value[key]
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def parse_shadiao(data: str | bytes) -> str:
    return _json_get(data, "data.text")


def parse_sweet(data: str | bytes) -> str:
    return _json_get(data, "returnObj.content")


def parse_duanzi(data: str | bytes) -> str:
    return _json_get(data, "duanzi").replace("<br>", "\n")


def parse_ergofabulous(html: str | bytes) -> str:
    """Extract the insult from the page; raise ValueError if it is missing."""
    doc = lxml.html.fromstring(html)
    texts = doc.xpath(_ERGOFABULOUS_XPATH)
    if not texts:
        raise ValueError("insult not found in page")
    return str(texts[0])


@dataclass(frozen=True)
class _Source:
    url: str
    method: str
    referer: str | None
    parse: Callable[[bytes], str]


_SOURCES: dict[str, _Source] = {
    "哄我": _Source(CHP_URL, "GET", SD_REFERER, parse_shadiao),
    "来碗毒鸡汤": _Source(DU_URL, "GET", SD_REFERER, parse_shadiao),
    "发个朋友圈": _Source(PYQ_URL, "GET", SD_REFERER, parse_shadiao),
    "来碗绿茶": _Source(CHAYI_URL, "GET", LOVELIVE_REFERER, parse_sweet),
    "渣我": _Source(GANHAI_URL, "GET", LOVELIVE_REFERER, parse_sweet),
    "讲个段子": _Source(YDUANZI_URL, "POST", YDUANZI_REFERER, parse_duanzi),
    "马丁路德骂我": _Source(ERGOFABULOUS_URL, "GET", None, parse_ergofabulous),
}

COMMANDS: tuple[str, ...] = tuple(_SOURCES)


def fetch_text(command: str, session: requests.Session | None = None) -> str:
    """Fetch the reply text for one of the supported commands."""
    try:
        source = _SOURCES[command]
    except KeyError:
        raise ValueError(f"unknown command: {command!r}") from None
    headers = {}
    if source.referer is not None:
        headers = {"Referer": source.referer, "User-Agent": UA}
    client = session if session is not None else requests.Session()
    response = client.request(source.method, source.url, headers=headers, timeout=_TIMEOUT)
    response.raise_for_status()
    return source.parse(response.content)