"""Shared character classes, known TLDs and service tables.

The matchers are explicit scanners, but they lean on a handful of small
regexes and lookup tables defined here so that every matcher agrees on what
a "word character" or a "domain label" is.
"""

from __future__ import annotations
import re

# Letters incl. non-ASCII ranges, so IDN domains keep their shape.
ALPHA = (
    r"A-Za-zªµºÀ-ÖØ-öø-˿"
    r"Ͱ-῿Ⰰ-⿯぀-퟿豈-﷏"
    # Fullwidth forms: letters and halfwidth kana only, never punctuation.
    r"ﷰ-﷿ﹰ-﻾Ａ-Ｚａ-ｚｦ-ￜ"
)
ALNUM = r"0-9" + ALPHA

DOMAIN_LABEL = rf"[{ALNUM}](?:[{ALNUM}-]{{0,61}}[{ALNUM}])?"
DOMAIN_RE = re.compile(rf"{DOMAIN_LABEL}(?:\.{DOMAIN_LABEL})*")

# Characters allowed in a URL path/query/fragment.
URL_PATH_CHARS = frozenset(
    "-+&@#/%=~_|$*!:,.;?'^[](){}"
)
# Trailing characters treated as sentence punctuation, never URL content.
URL_TRAILING_PUNCT = frozenset(".,;:!?'\"")

SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]{0,63}://")
UNSAFE_SCHEMES = frozenset({"javascript", "vbscript", "data"})

IPV4_RE = re.compile(
    r"(?:(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)\.){3}"
    r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
    r"(?![\d.]\d)"
)

# RFC 5322 "atext" for the local part of an address.
EMAIL_LOCAL_CHARS = rf"[{ALNUM}!#$%&'*+/=?^_`{{|}}~\-]"
EMAIL_RE = re.compile(
    rf"(?:mailto:)?"
    rf"([_{ALNUM}](?:{EMAIL_LOCAL_CHARS}|\.(?![.@]))*)"
    rf"@({DOMAIN_LABEL}(?:\.{DOMAIN_LABEL})*\.[{ALPHA}]{{2,63}})",
    re.IGNORECASE,
)
# An email is rejected when the match is glued to one of these.
EMAIL_BAD_PRECEDING = re.compile(rf"[@.\-_{ALNUM}]")

_SEP = r"[-. ]"
PHONE_RE = re.compile(
    r"(?P<number>"
    # NANP-ish: [+CC ]( area ) xxx-xxxx
    rf"(?:(?P<nanp_plus>\+)?\d{{1,3}}{_SEP}?)?"
    rf"(?:\(\d{{3}}\)|\d{{3}}){_SEP}?\d{{3}}{_SEP}?\d{{4}}"
    r"|"
    # International: +CC then 7-13 more digits with separators
    r"(?P<intl_plus>\+)(?:9[976]\d|8[987530]\d|6[987]\d|5[90]\d|42\d|3[875]\d|"
    r"2[98654321]\d|9[8543210]|8[6421]|6[6543210]|5[87654321]|"
    r"4[987654310]|3[9643210]|2[70]|7|1)"
    rf"{_SEP}?(?:\d{_SEP}?){{6,12}}\d"
    r")"
    # Optional extension: " x123", " ext. 123", ",123", ";123"
    r"(?:(?:[ \t]*(?:x|ext\.?|extension)[ \t]*|[,;]+)(?P<ext>\d{1,6}))?",
    re.IGNORECASE,
)

WORD_CHAR_RE = re.compile(rf"[_{ALNUM}]")


def is_word_char(ch: str) -> bool:
    return bool(ch) and WORD_CHAR_RE.match(ch) is not None


# service -> (identifier char class, max length)
MENTION_SERVICES: dict[str, tuple[str, int]] = {
    "twitter": (rf"[_{ALNUM}]", 50),
    "instagram": (rf"[_.{ALNUM}]", 30),
    "soundcloud": (rf"[-_.{ALNUM}]", 50),
    "tiktok": (rf"[_.{ALNUM}]", 23),
    "youtube": (rf"[-_.{ALNUM}]", 100),
}

MENTION_HREFS: dict[str, str] = {
    "twitter": "https://twitter.com/{}",
    "instagram": "https://instagram.com/{}",
    "soundcloud": "https://soundcloud.com/{}",
    "tiktok": "https://www.tiktok.com/@{}",
    "youtube": "https://youtube.com/@{}",
}

HASHTAG_HREFS: dict[str, str] = {
    "twitter": "https://twitter.com/hashtag/{}",
    "facebook": "https://www.facebook.com/hashtag/{}",
    "instagram": "https://instagram.com/explore/tags/{}",
    "tiktok": "https://www.tiktok.com/tag/{}",
    "youtube": "https://youtube.com/hashtag/{}",
}

HASHTAG_MAX_LEN = 139


# Generic + sponsored TLDs commonly seen in running text, plus every
# two-letter country code.
_GENERIC_TLDS = """
aero app art asia biz blog cat cloud club com coop dev edu email gov info
int io jobs live me mil mobi museum name net news online org page post pro
shop site store tech tel travel tv xxx xyz academy agency company design
digital expert global group guru life media network one ltd solutions space
studio team today tools top website wiki work world zone
"""

_COUNTRY_TLDS = """
ac ad ae af ag ai al am ao aq ar as at au aw ax az ba bb bd be bf bg bh bi
bj bm bn bo br bs bt bw by bz ca cc cd cf cg ch ci ck cl cm cn co cr cu cv
cw cx cy cz de dj dk dm do dz ec ee eg er es et eu fi fj fk fm fo fr ga gd
ge gf gg gh gi gl gm gn gp gq gr gs gt gu gw gy hk hm hn hr ht hu id ie il
im in iq ir is it je jm jo jp ke kg kh ki km kn kp kr kw ky kz la lb lc li
lk lr ls lt lu lv ly ma mc md me mg mh mk ml mm mn mo mp mq mr ms mt mu mv
mw mx my mz na nc ne nf ng ni nl no np nr nu nz om pa pe pf pg ph pk pl pm
pn pr ps pt pw py qa re ro rs ru rw sa sb sc sd se sg sh si sk sl sm sn so
sr ss st sv sx sy sz tc td tf tg th tj tk tl tm tn to tr tt tv tw tz ua ug
uk us uy uz va vc ve vg vi vn vu wf ws ye yt za zm zw
"""

KNOWN_TLDS: frozenset[str] = frozenset((_GENERIC_TLDS + _COUNTRY_TLDS).split())


def is_known_tld(domain: str) -> bool:
    """True when the last label of ``domain`` is a known TLD."""
    tld = domain.rsplit(".", 1)[-1].lower()
    return tld in KNOWN_TLDS
