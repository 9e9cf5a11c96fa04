"""
Default HTTP headers used by the session backends.

Novel aggregator sites mostly sit behind WordPress themes and CDN front ends
that reject obviously scripted clients, so requests present themselves as a
desktop browser unless configured otherwise.
"""

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/136.0.0.0 Safari/537.36"
)

DEFAULT_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
)

ACCEPT_JSON = "application/json, text/javascript, */*; q=0.01"

DEFAULT_USER_HEADERS = {
    "Accept": DEFAULT_ACCEPT,
    "Accept-Encoding": "gzip, deflate",
    "Accept-Language": "en-US,en;q=0.9,es;q=0.8,tr;q=0.7,ar;q=0.6",
    "User-Agent": DEFAULT_USER_AGENT,
    "Connection": "keep-alive",
}

# Headers WordPress ``admin-ajax.php`` endpoints expect on form posts.
AJAX_FORM_HEADERS = {
    "Accept": ACCEPT_JSON,
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
}
