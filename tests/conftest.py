"""Shared pytest fixtures for spmkit tests."""

import json

import pytest

ETHER_MANIFEST = """\
// swift-tools-version:4.0

import PackageDescription

let package = Package(
    name: "Ether",
    dependencies: [
        .package(url: "https://github.com/vapor/console.git", from: "3.0.0-rc"),
        .package(url: "https://github.com/vapor/core.git", from: "3.0.0-rc")
    ],
    targets: [
        .target(name: "GitHub", dependencies: ["Core"]),
        .target(name: "Helpers", dependencies: ["Core", "Console"]),
        .target(name: "Ether", dependencies: ["Helpers", "Console"]),
        .target(name: "Executable", dependencies: ["Ether", "Console"])
    ]
)
"""

EMPTY_DEPS_MANIFEST = """\
// swift-tools-version:4.0
import PackageDescription

let package = Package(
    name: "App",
    dependencies: [],
    targets: [
        .target(name: "App", dependencies: []),
        .testTarget(name: "AppTests", dependencies: []),
    ]
)
"""

NO_DEPS_MANIFEST = """\
// swift-tools-version:5.5
import PackageDescription

let package = Package(
    name: "App",
    products: [
        .library(name: "App", targets: ["App"]),
    ],
    targets: [
        .target(name: "App", dependencies: []),
    ]
)
"""


def _v1_lockfile(pins: list[tuple[str, str]]) -> str:
    """Package.resolved (format version 1) with (url, package) pins."""
    return json.dumps(
        {
            "object": {
                "pins": [
                    {
                        "package": name,
                        "repositoryURL": url,
                        "state": {"branch": None, "revision": "0" * 40, "version": "1.0.0"},
                    }
                    for url, name in pins
                ]
            },
            "version": 1,
        },
        indent=2,
    )


def _v2_lockfile(pins: list[tuple[str, str]]) -> str:
    """Package.resolved (format version 2) with (url, identity) pins."""
    return json.dumps(
        {
            "pins": [
                {
                    "identity": name,
                    "kind": "remoteSourceControl",
                    "location": url,
                    "state": {"revision": "0" * 40, "version": "1.0.0"},
                }
                for url, name in pins
            ],
            "version": 2,
        },
        indent=2,
    )


@pytest.fixture
def ether_manifest() -> str:
    return ETHER_MANIFEST


@pytest.fixture
def empty_deps_manifest() -> str:
    return EMPTY_DEPS_MANIFEST


@pytest.fixture
def no_deps_manifest() -> str:
    return NO_DEPS_MANIFEST


@pytest.fixture
def v1_lockfile():
    return _v1_lockfile


@pytest.fixture
def v2_lockfile():
    return _v2_lockfile
