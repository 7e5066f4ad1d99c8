"""
DocuScan – document registry with per-user document type permissions.
"""
