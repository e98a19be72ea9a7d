"""
Merkle Allowlist API (FastAPI)

HTTP host for one allowlist instance:
- POST /root/initialize, POST /root/rotate, GET /root, GET /root/history
- POST /verify - Verify an entitlement proof
- POST /claim - Redeem an entitlement
- GET /claims/{beneficiary} - Claim status
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
