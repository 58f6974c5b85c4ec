"""Port interfaces for neosession.

Ports define the contracts that adapters must implement. Code that runs
queries depends only on these abstractions, not on the driver.
"""

from neosession.ports.db_session import DbSessionPort

__all__ = ["DbSessionPort"]
