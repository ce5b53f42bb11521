[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wxkit"
version = "0.1.0"
description = "WeChat Pay merchant API client: signed XML requests, refunds, bill downloads, notification checks and event message helpers"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "wechat",
    "wechat-pay",
    "payments",
    "merchant",
    "xml",
    "signature",
]
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
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["wxkit"]

[tool.hatch.build.targets.sdist]
include = ["wxkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
