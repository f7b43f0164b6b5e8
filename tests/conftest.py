import pytest

PAGE_HTML = """
<html><body>
  <h1 class="t">  Hello World  </h1>
  <ul>
    <li class="item">a</li>
    <li class="item"> b </li>
    <li class="item">c</li>
  </ul>
  <a class="link" href="/x">Go there</a>
  <a class="nav" href="/1">One</a>
  <a class="nav">No href</a>
  <a class="nav" href="/2">Two</a>
  <span class="comments">42 comments</span>
  <span class="chatter">No comments yet</span>
  <span class="price">19.99</span>
  <span class="stock">Yes</span>
</body></html>
"""


@pytest.fixture
def page_html():
    return PAGE_HTML
