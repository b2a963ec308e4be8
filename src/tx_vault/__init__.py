# PUBLIC_INTERFACE
"""
Transaction Vault Backend package.

- security.crypto: key derivation and the AES-256-GCM token codec
- core.transaction_store: in-memory transaction store
- app: FastAPI application factory (create_app) and ASGI `app`
"""
