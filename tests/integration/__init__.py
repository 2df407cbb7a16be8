"""Integration tests for confluence-publish.

These tests run the configuration loader, the publisher and the page
synchronizer together against an in-memory Confluence, with real files in a
temporary directory. Only the network gateway and the Pandoc renderer are
replaced.
"""
