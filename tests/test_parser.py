import jinja2
import pytest

from mdsite.parser import parse_markdown_with_tailwind, replace_file_extension

PARAGRAPH_OPEN = '<p class="text-base font-normal leading-relaxed mb-3">'
LIST_OPEN = '<ul class="list-disc text-base font-normal list-inside ml-4">'


@pytest.fixture
def env():
    return jinja2.Environment(
        loader=jinja2.DictLoader(
            {"partials/image.html": '<img src="{{ src }}" alt="{{ alt }}">'}
        )
    )


@pytest.fixture
def bare_env():
    return jinja2.Environment(loader=jinja2.DictLoader({}))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("photo.png", "photo.webp"),
        ("photo", "photo.webp"),
        ("archive.tar.gz", "archive.tar.webp"),
        ("dir/image.jpeg", "dir/image.webp"),
    ],
)
def test_replace_file_extension(path, expected):
    assert replace_file_extension(path, "webp") == expected


def test_heading_levels(env):
    assert (
        parse_markdown_with_tailwind("# Title", env)
        == '<h1 class="text-3xl font-bold text-black-600 mb-6">Title</h1>'
    )
    assert (
        parse_markdown_with_tailwind("### Sub", env)
        == '<h3 class="text-xl font-medium text-black-400 mb-2">Sub</h3>'
    )
    assert parse_markdown_with_tailwind("##### Deep", env).startswith(
        '<h5 class="text-xl font-medium text-black-300">'
    )


def test_paragraph(env):
    assert parse_markdown_with_tailwind("Hello world", env) == PARAGRAPH_OPEN + "Hello world</p>"


def test_link_with_title(env):
    html = parse_markdown_with_tailwind('[home](/index.html "Home")', env)
    assert (
        '<a class="text-base font-bold leading-relaxed text-green-700" '
        'href="/index.html" title="Home">home</a>'
    ) in html


def test_link_without_title_has_empty_title(env):
    html = parse_markdown_with_tailwind("[x](/y.html)", env)
    assert 'href="/y.html" title="">x</a>' in html


def test_inline_code(env):
    html = parse_markdown_with_tailwind("use `cargo`", env)
    assert (
        '<code class="bg-gray-200 font-normal text-red-600 px-1 py-0.5 rounded">cargo</code>'
        in html
    )


def test_fenced_code_block(env):
    html = parse_markdown_with_tailwind("```rust\nfn main() {}\n```", env)
    assert html.endswith('<code class="language-rust">fn main() {}\n</code></pre>')
    assert html.startswith('<pre class="bg-gray-900')


def test_indented_code_block(env):
    html = parse_markdown_with_tailwind("    let x = 1;\n", env)
    assert '<code class="language-none">let x = 1;\n</code></pre>' in html


def test_image_uses_template_and_webp(env):
    html = parse_markdown_with_tailwind('![a cat](img/cat.png "Cat")', env)
    assert '<img src="./static/img/cat.webp" alt="Cat">' in html
    assert "a cat" not in html


def test_image_template_missing(bare_env):
    html = parse_markdown_with_tailwind("![alt](pic.jpg)", bare_env)
    assert "<!-- Failed to render image -->" in html


def test_tight_bullet_list(env):
    html = parse_markdown_with_tailwind("- one\n- two", env)
    assert html == LIST_OPEN + "<li>one</li>\n<li>two</li>\n</ul>"


def test_ordered_list_closes_with_ul(env):
    html = parse_markdown_with_tailwind("1. a\n2. b", env)
    assert html.startswith("<ol>\n")
    assert html.endswith("</ul>")


def test_text_is_not_escaped(env):
    html = parse_markdown_with_tailwind("a < b", env)
    assert "a < b" in html


def test_strikethrough_and_emphasis(env):
    html = parse_markdown_with_tailwind("~~gone~~ *it*", env)
    assert "<del>gone</del>" in html
    assert "<em>it</em>" in html


def test_table_cells_render_as_td(env):
    html = parse_markdown_with_tailwind("| a | b |\n|---|---|\n| 1 | 2 |", env)
    assert html.startswith("<table><thead><tr>")
    assert "<th>" not in html
    assert html.count("<td>") == 4
    assert html.endswith("</tbody></table>\n")
    assert "</tr></thead><tbody>\n" in html