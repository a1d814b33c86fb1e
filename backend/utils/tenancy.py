from typing import Optional
from fastapi import Header, HTTPException

def get_tenant_id(x_tenant_id: str = Header(...)) -> str:
    tenant_id = x_tenant_id.strip()
    if not tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is missing")
    return tenant_id

def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    # Identity is resolved upstream; it is only recorded as created_by/updated_by.
    if x_user_id is None:
        return None
    return x_user_id.strip() or None
