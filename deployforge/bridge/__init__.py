"""Bridges to external collaborators: processes, keypair files, JSON-RPC and the verification API."""
