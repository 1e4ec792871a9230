"""
Shared test fixtures: a scripted mock adapter wired to the package services.
"""

import textwrap

import pytest

from sunpkg.adapters.mock import MockAdapter
from sunpkg.adapters.registry import AdapterRegistry
from sunpkg.core.services.package_commands import PackageCommands
from sunpkg.core.services.package_query import PackageQuery
from sunpkg.core.services.reconciler import Reconciler


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    return AdapterRegistry(mock_adapter=mock_adapter)


@pytest.fixture
def commands(registry: AdapterRegistry) -> PackageCommands:
    return PackageCommands(registry)


@pytest.fixture
def package_query(commands: PackageCommands) -> PackageQuery:
    return PackageQuery(commands)


@pytest.fixture
def reconciler(package_query: PackageQuery, commands: PackageCommands) -> Reconciler:
    return Reconciler(package_query, commands)


@pytest.fixture
def inventory_text() -> str:
    return textwrap.dedent("""\
           PKGINST:  SUNWcsr
              NAME:  Core Solaris, (Root)
          CATEGORY:  system
              ARCH:  sparc
           VERSION:  11.10.0,REV=2005.01.21.15.53
           BASEDIR:  /
            VENDOR:  Sun Microsystems, Inc.
              DESC:  core software for a specific instruction-set architecture
            STATUS:  completely installed
             FILES:      863 installed pathnames

           PKGINST:  SUNWesu
              NAME:  Extended System Utilities
          CATEGORY:  system
              ARCH:  sparc
           VERSION:  11.10.0,REV=2005.01.08.05.16
           BASEDIR:  /
            VENDOR:  Sun Microsystems, Inc.
              DESC:  Extended System Utilities
    """)
