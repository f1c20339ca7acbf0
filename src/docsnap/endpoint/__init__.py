"""Status Endpoint module for docsnap.

An optional read-only HTTP server that publishes the latest status
message and extracted text of a running watch session.
"""
