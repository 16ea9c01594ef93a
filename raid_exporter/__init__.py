"""
RAID Exporter — turns an extracted RAID: Shadow Legends account snapshot into
a versioned set of JSON documents (roster, artifacts, account, metadata).
"""

__version__ = "1.0.0"
