[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdsite"
version = "0.1.0"
description = "A small static site generator: Markdown pages with YAML front matter rendered through Jinja2 templates"
requires-python = ">=3.10"
keywords = ["static site generator", "markdown", "jinja2", "tailwind", "blog"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Site Management",
    "Topic :: Text Processing :: Markup :: Markdown",
]
dependencies = [
    "pyyaml>=6.0",
    "jinja2>=3.1",
    "markdown-it-py>=3.0",
    "pillow>=10.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
mdsite = "mdsite.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mdsite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
