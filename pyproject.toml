[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "expandkit"
version = "0.1.0"
description = "Decompressors for legacy Microsoft setup files (SZDD, SZ, KWAJ), a DEFLATE inflater and ISO9660/High Sierra structure readers"
requires-python = ">=3.10"
dependencies = []
keywords = ["szdd", "kwaj", "expand", "lzss", "deflate", "inflate", "huffman", "iso9660", "high-sierra", "decompression"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
filtexp = "expandkit.filtexp:main"

[tool.hatch.build.targets.wheel]
packages = ["expandkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
