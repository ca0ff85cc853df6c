[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "brushkit"
version = "0.1.0"
description = "Pure-Python image writers (PNG, BMP, TGA, HDR, JPEG) and a layout-agnostic text-editing engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["png", "bmp", "tga", "hdr", "jpeg", "deflate", "image-writer", "text-editing", "undo"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["brushkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
