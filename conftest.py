"""Keep test runs away from the user's data directory.

The engine reads its configuration and opens its default logger at import
time, so the overrides have to be in place before any test module imports
``core`` or ``modhub``.
"""

import os
import tempfile

os.environ.setdefault("MODHUB_PATHS__DATA_DIR", tempfile.mkdtemp(prefix="modhub-tests-"))
os.environ.setdefault("MODHUB_LOGGING__PERSIST", "false")
