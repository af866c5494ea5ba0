"""
Sentences API Service.

A small JSON API for short user-submitted sentences.

The service allows clients to:
- Create, update, list and delete sentences
- Attach and detach tags on a sentence
- Vote a sentence up or down, once per client
- Fetch a random sentence without a full-table random scan
"""

__version__ = "0.1.0"
