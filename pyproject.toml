[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matebg"
version = "0.1.0"
description = "Desktop background building blocks: colours, gradients, image compositing, XML slideshows and EDID monitor decoding"
requires-python = ">=3.10"
keywords = ["desktop", "background", "wallpaper", "slideshow", "edid", "monitor", "gradient"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["matebg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
