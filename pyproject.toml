[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tiendainv"
version = "0.1.0"
description = "Inventory, shopping cart and sales reports for a small shop, driven from the terminal"
requires-python = ">=3.10"
dependencies = []
keywords = ["inventory", "point-of-sale", "shop", "cart", "csv", "sales-report"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Spanish",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tiendainv = "tiendainv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tiendainv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
