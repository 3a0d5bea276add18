[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wtracker"
version = "0.1.0"
description = "Error tracking client that captures exceptions, messages and breadcrumbs and posts them as JSON to an ingest endpoint"
requires-python = ">=3.10"
keywords = ["error-tracking", "exceptions", "monitoring", "breadcrumbs", "wsgi"]
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
    "Topic :: Software Development :: Bug Tracking",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wtracker"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
