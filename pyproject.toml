[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lustremon"
version = "0.1.0"
description = "Read Lustre server and host statistics from a proc tree, track them as rates, and record metric sessions"
requires-python = ">=3.10"
dependencies = []
keywords = ["lustre", "monitoring", "proc", "filesystem", "statistics", "ost", "mdt", "lnet"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lmtmetric = "lustremon.metric:main"

[tool.hatch.build.targets.wheel]
packages = ["lustremon"]

[tool.pytest.ini_options]
addopts = "-ra"
