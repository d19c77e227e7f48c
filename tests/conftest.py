"""
Shared fixtures for the clearpage test suite.
"""

import pytest

from clearpage.config import EngineConfig
from clearpage.extractor import ReadabilityEngine
from tests.helpers import link_farm, page, prose


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def engine(engine_config) -> ReadabilityEngine:
    return ReadabilityEngine(engine_config)


@pytest.fixture
def blog_html() -> str:
    """A typical blog post: navigation, article body, sidebar links and footer."""
    return page(
        f"""
        <nav class="site-nav">{link_farm(6)}</nav>
        <article class="post">
            <h1 class="post-title">Growing Lanterns in the Meadow</h1>
            <div class="byline">By Ada Field</div>
            <p>{prose(40, 1)}</p>
            <h2>First <em>steps</em></h2>
            <p>{prose(35, 2)} With <strong>strong roots</strong> and care.</p>
            <blockquote>{prose(12, 3)}</blockquote>
            <ul><li>{prose(4, 4)}</li><li>{prose(5, 5)}</li></ul>
            <ol><li>{prose(3, 6)}</li></ol>
            <pre><code>def grow(seed):
    return seed * 2
</code></pre>
            <img src="/images/meadow.jpg" alt="A quiet meadow">
            <p>Subscribe to our newsletter for more posts like this.</p>
        </article>
        <aside class="sidebar">{link_farm(10)}</aside>
        <footer>Copyright 2025 Meadow Press</footer>
        """,
        head='<meta property="og:site_name" content="Meadow Press">'
        '<meta name="description" content="How lanterns grow.">',
        title="Growing Lanterns in the Meadow | Meadow Press",
    )
