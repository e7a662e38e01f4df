from bs4 import BeautifulSoup, Comment
import re

JAVASCRIPT_URI = re.compile(r'^\s*javascript:', re.IGNORECASE)


def sanitize_html(html: str) -> str:
    """
    Strips active content from a scraped page before it is parsed:
    <script> and <iframe> elements, inline event handlers (on*)
    and attributes carrying javascript: URIs. Everything else,
    including table structure, is left untouched.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(["script", "iframe"]):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        attrs = tag.attrs.copy()
        for attr, value in attrs.items():
            if attr.lower().startswith("on"):
                del tag.attrs[attr]
            elif isinstance(value, str) and JAVASCRIPT_URI.match(value):
                del tag.attrs[attr]

    return str(soup)
