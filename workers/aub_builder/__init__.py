"""
aub_builder — headless player-build shim.

Read build configuration from the environment, build one platform target
through the host's build executor, and emit a single authoritative
build-result.json plus a process exit code.

One build per process. No queueing, no retries.
"""

__version__ = "0.1.0"
STAMPER_VERSION = "0.1.0"
RESULT_FILENAME = "build-result.json"
