"""Demo script building a tiny site with consolidate.

Pages are Jinja2 templates with a shared header partial, blog posts are
Markdown. Run from the repository root::

    python examples/site_demo.py
"""

from pathlib import Path

from consolidate import Engines, EngineNotInstalledError, TemplateCache
from consolidate.config import load_config

SITE = Path(__file__).parent / "site"


def render_posts(engines: Engines) -> list:
    """Render every Markdown post, skipping them if Markdown is not installed."""
    try:
        markdown = engines["markdown"]
    except EngineNotInstalledError as e:
        print(f"⚠️  {e}")
        return []

    posts = []
    for path in sorted((SITE / "blog").glob("*.md")):
        posts.append(markdown(path))
        print(f"📝 Rendered post: {path.name}")
    return posts


def demo_site():
    print("🏗️  Building site")
    print("=" * 50)

    config = load_config(SITE / "consolidate.yaml")
    engines = Engines(cache=TemplateCache(), config=config)

    posts = render_posts(engines)
    for _ in range(2):
        html = engines.render_file(
            SITE / "pages" / "index.j2",
            {
                "title": "My Site",
                "user": {"name": "Tobi"},
                "posts": posts,
                "partials": {"header": "shared/header"},
            },
        )

    print(html)
    print(f"📊 Cache: {engines.cache.get_stats()}")


if __name__ == "__main__":
    demo_site()
