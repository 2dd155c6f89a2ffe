"""
hytale_launcher package
-----------------------
Runs a locally built Hytale mod against a downloaded, version-pinned dedicated
server: fetches hytale-downloader, resolves the current server version, caches
and unpacks the server bundle, installs jars into Server/ and starts the server.
"""

__version__ = "1.0.0"
